"""
deepcheck - Deep Comparison and Failure Reporting for Tests

Compares two values structurally, renders both sides with a configurable
dumper, diffs multiline renderings and reports every mismatch as a
structured notice addressed by its trail.
"""

from .config import (
    Settings,
    SETTINGS,
    configure,
    load_settings,
    settings_from_mapping,
)
from .dump import Dump, register_type_dumper
from .dumpers import Dumper
from .equal import equal, equal_error, not_equal
from .exceptions import (
    ConfigError,
    DeepCheckError,
    ERR_NOTICE,
    NoticeError,
    RegistrationError,
)
from .helpers import is_nil, will_panic
from .lcs import (
    apply_edits,
    diff_bytes,
    diff_lines,
    diff_runes,
    diff_strings,
)
from .models import Byte, Edit, Kind, Row
from .notice import (
    Notice,
    from_error,
    indent,
    join,
    pad,
    sort_notices,
    trail_cmp,
)
from .options import (
    Checker,
    Options,
    default_options,
    field_name,
    register_type_checker,
)
from .tester import Spy, T, assert_equal, assert_not_equal
from .unified import to_unified, unified

__version__ = "1.0.0"
__all__ = [
    # Compare
    "equal",
    "not_equal",
    "equal_error",
    "Options",
    "Checker",
    "default_options",
    "field_name",
    "register_type_checker",
    # Notice
    "Notice",
    "Row",
    "from_error",
    "join",
    "sort_notices",
    "trail_cmp",
    "indent",
    "pad",
    # Dump
    "Dump",
    "Dumper",
    "register_type_dumper",
    "Kind",
    "Byte",
    # Diff
    "Edit",
    "diff_strings",
    "diff_bytes",
    "diff_runes",
    "diff_lines",
    "apply_edits",
    "to_unified",
    "unified",
    # Test runner bridge
    "T",
    "Spy",
    "assert_equal",
    "assert_not_equal",
    "is_nil",
    "will_panic",
    # Configuration
    "Settings",
    "SETTINGS",
    "configure",
    "load_settings",
    "settings_from_mapping",
    # Errors
    "DeepCheckError",
    "NoticeError",
    "RegistrationError",
    "ConfigError",
    "ERR_NOTICE",
]
