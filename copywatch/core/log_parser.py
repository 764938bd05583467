# copywatch/core/log_parser.py

import logging
import re
from pathlib import Path
from typing import Iterator, Union

from .interfaces.types import ParseResult

logger = logging.getLogger(__name__)

class NumericTokenizer:
    """
    Extracts freestanding numeric tokens from free text.
    
    A freestanding token is a maximal run of decimal digits with whitespace
    immediately on both sides. Digits touching anything else (a path, a
    timestamp, a flag such as /R:1) or the start/end of the text are not
    tokens, so a number still being written at the end of a log is skipped.
    """
    
    _PATTERN = re.compile(r"(?<=\s)\d+(?=\s)")
    
    def tokens(self, text: str) -> Iterator[int]:
        """
        Yield every freestanding numeric token in text.
        
        Args:
            text: Raw text to scan
            
        Yields:
            int: Value of each token, in order of appearance
        """
        for match in self._PATTERN.finditer(text):
            yield int(match.group())


class LogParser:
    """Derives record and byte counts from a robocopy log."""
    
    def __init__(self, tokenizer: NumericTokenizer = None):
        self.tokenizer = tokenizer or NumericTokenizer()
    
    @staticmethod
    def count_records(text: str) -> int:
        """Number of lines minus the leading header line, never negative."""
        return max(0, len(text.splitlines()) - 1)
    
    def parse(self, text: str) -> ParseResult:
        """
        Parse raw log text.
        
        Args:
            text: Whole log contents
            
        Returns:
            ParseResult: record count, summed byte tokens and token count
        """
        byte_sum = 0
        token_count = 0
        for value in self.tokenizer.tokens(text):
            byte_sum += value
            token_count += 1
        return ParseResult(
            record_count=self.count_records(text),
            byte_sum=byte_sum,
            token_count=token_count
        )
    
    def parse_file(self, log_path: Union[str, Path]) -> ParseResult:
        """
        Read a log file in full and parse it.
        
        A log that does not exist yet parses as empty.
        """
        return self.parse(read_log_text(log_path))


def read_log_text(log_path: Union[str, Path]) -> str:
    """
    Read a log that another process may still be appending to.
    
    Args:
        log_path: Path to the log file
        
    Returns:
        str: File contents, or an empty string if the file is missing
    """
    try:
        with open(log_path, 'r', encoding='utf-8', errors='replace') as f:
            return f.read()
    except FileNotFoundError:
        logger.debug(f"Log not created yet: {log_path}")
        return ""
