from dupelink.cli import main

main()
