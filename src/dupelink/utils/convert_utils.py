"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
Size parsing for the --min-size / --max-size options and size formatting for reports.
Units are binary: 1K = 1024 bytes.
"""
import re

_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")
_MULTIPLIERS = {"": 1, "K": 1024, "M": 1024 ** 2, "G": 1024 ** 3, "T": 1024 ** 4, "P": 1024 ** 5}

# number, optional unit letter, optional trailing "B"
_SIZE_RE = re.compile(r"^(?P<sign>-?)(?P<number>\d+(?:\.\d+)?)\s*(?P<unit>[KMGTP]?)B?$")


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """Formats a byte count with two decimals, e.g. 1536 -> '1.50KB'."""
        if size_bytes < 0:
            return "0B"

        value = float(size_bytes)
        for unit in _UNITS:
            if value < 1024:
                return f"{value:.2f}{unit}"
            value /= 1024
        return f"{value:.2f}EB"

    @staticmethod
    def human_to_bytes(size_str: str) -> int:
        """
        Parses '1000', '1K', '1.5GB', '2048kb' and the like into bytes.

        Raises:
            ValueError: For negative sizes or text that is not a size.
        """
        text = size_str.strip().upper()
        match = _SIZE_RE.match(text)
        if not match:
            raise ValueError(
                f"Invalid size format: '{text}'. "
                f"Supported formats: 1.5GB, 2048KB, 1000, 1K, 1M, etc."
            )
        if match.group("sign"):
            raise ValueError(f"Negative size not allowed: '{text}'")
        return int(float(match.group("number")) * _MULTIPLIERS[match.group("unit")])
