"""
ocrprofiler: Drive an OCR post-correction profiler from Python.

The profiler is an external executable. This library writes tokens to it,
runs it as a subprocess and decodes its output into a Profile: a mapping
from OCR tokens to ranked correction candidates.

Example:
    >>> import ocrprofiler
    >>> lang = ocrprofiler.find_language("/usr/local/share/profiler", "german")
    >>> tokens = [ocrprofiler.OCRToken("Vnheilfolles"), ocrprofiler.LexiconEntry("Wasser")]
    >>> profile = ocrprofiler.profile(lang, tokens)
    >>> for candidate in profile["Vnheilfolles"].candidates:
    ...     print(candidate.suggestion, candidate.weight)
"""

from ocrprofiler.codec import (
    decode_profile,
    encode_profile,
    format_candidate,
    format_pattern,
    parse_candidate,
    parse_pattern,
    parse_patterns,
)
from ocrprofiler.config import ProfilerConfig
from ocrprofiler.driver import (
    LineLogger,
    LoggingLineLogger,
    OutputMode,
    Profiler,
    build_args,
    profile,
    stream_candidates,
)
from ocrprofiler.exceptions import (
    ConfigurationError,
    DecodeError,
    ExecutionError,
    LanguageNotFoundError,
    LaunchError,
    MalformedCandidateError,
    MalformedPatternError,
    MalformedProfileError,
    ProcessError,
    ProfilerCancelledError,
    ProfilerError,
    ProfilerTimeoutError,
    WriteError,
)
from ocrprofiler.languages import LanguageConfiguration, find_language, list_languages
from ocrprofiler.models import Candidate, Interpretation, Pattern, Profile
from ocrprofiler.tokens import (
    CorrectedToken,
    LexiconEntry,
    OCRToken,
    Token,
    TokenFormat,
    format_token,
)

__version__ = "0.1.0"
__all__ = [
    # Main API
    "Profiler",
    "profile",
    "stream_candidates",
    "build_args",
    "OutputMode",
    # Configuration
    "ProfilerConfig",
    "LanguageConfiguration",
    "list_languages",
    "find_language",
    # Tokens
    "Token",
    "LexiconEntry",
    "OCRToken",
    "CorrectedToken",
    "TokenFormat",
    "format_token",
    # Models
    "Profile",
    "Interpretation",
    "Candidate",
    "Pattern",
    # Codecs
    "parse_pattern",
    "parse_patterns",
    "format_pattern",
    "parse_candidate",
    "format_candidate",
    "decode_profile",
    "encode_profile",
    # Logging
    "LineLogger",
    "LoggingLineLogger",
    # Exceptions
    "ProfilerError",
    "ConfigurationError",
    "LanguageNotFoundError",
    "MalformedPatternError",
    "MalformedCandidateError",
    "MalformedProfileError",
    "ProcessError",
    "LaunchError",
    "WriteError",
    "ExecutionError",
    "DecodeError",
    "ProfilerCancelledError",
    "ProfilerTimeoutError",
]
