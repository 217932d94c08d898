"""Lookup helpers for renderers: language names, icons and status colors.

None of these take part in parsing. They are pure functions over the
segment fields and never raise.
"""

from types import MappingProxyType
from typing import Mapping, Tuple, Union

from .segments import ResultStatus

__all__ = [
    "LANGUAGE_NAMES",
    "TOOL_ICONS",
    "set_use_unicode",
    "get_icon",
    "get_language_display_name",
    "get_tool_call_icon",
    "get_result_status_icon",
    "get_result_status_class",
    "get_result_status_style",
]

StatusKey = Union[ResultStatus, str]


# ── Icon mapping for Unicode/ASCII fallback ──

# Set by the CLI from the ``use-unicode`` config key
_USE_UNICODE = True


def set_use_unicode(enabled: bool) -> None:
    """Set whether to use Unicode icons (True) or ASCII fallback (False)."""
    global _USE_UNICODE
    _USE_UNICODE = enabled


_ICON_MAP = {
    "📝": "[W]",
    "📖": "[R]",
    "📁": "[D]",
    "✏️": "[~]",
    "🗑️": "[-]",
    "⚡": "[$]",
    "🔍": "[?]",
    "🖼️": "[I]",
    "🎨": "[A]",
    "🏷️": "[L]",
    "🔧": "[T]",
    "✅": "[OK]",
    "⚠️": "[!]",
    "❌": "[X]",
    "❓": "[?]",
}


def get_icon(unicode_icon: str) -> str:
    """Return ``unicode_icon``, or its ASCII stand-in when Unicode is off."""
    if _USE_UNICODE:
        return unicode_icon
    return _ICON_MAP.get(unicode_icon, unicode_icon)


# ── Languages ──

LANGUAGE_NAMES: Mapping[str, str] = MappingProxyType({
    "js": "JavaScript",
    "javascript": "JavaScript",
    "ts": "TypeScript",
    "typescript": "TypeScript",
    "vue": "Vue",
    "html": "HTML",
    "css": "CSS",
    "scss": "SCSS",
    "less": "Less",
    "json": "JSON",
    "xml": "XML",
    "yaml": "YAML",
    "yml": "YAML",
    "md": "Markdown",
    "markdown": "Markdown",
    "python": "Python",
    "py": "Python",
    "java": "Java",
    "go": "Go",
    "rust": "Rust",
    "c": "C",
    "cpp": "C++",
    "csharp": "C#",
    "cs": "C#",
    "php": "PHP",
    "ruby": "Ruby",
    "swift": "Swift",
    "kotlin": "Kotlin",
    "sql": "SQL",
    "shell": "Shell",
    "bash": "Bash",
    "sh": "Shell",
    "powershell": "PowerShell",
    "dockerfile": "Dockerfile",
    "plaintext": "纯文本",
    "text": "纯文本",
})


def get_language_display_name(lang: str) -> str:
    """Human-readable name for a fence tag; unknown tags are uppercased."""
    return LANGUAGE_NAMES.get(lang.lower(), lang.upper())


# ── Tool icons ──

# Order matters: the first key contained in the action wins, so the
# generic 搜索 entry shadows 搜索图片.
TOOL_ICONS: Tuple[Tuple[str, str], ...] = (
    ("写入文件", "📝"),
    ("读取文件", "📖"),
    ("读取目录", "📁"),
    ("修改文件", "✏️"),
    ("删除文件", "🗑️"),
    ("执行命令", "⚡"),
    ("搜索", "🔍"),
    ("搜索图片", "🖼️"),
    ("获取插画", "🎨"),
    ("生成Logo", "🏷️"),
)
_DEFAULT_TOOL_ICON = "🔧"


def get_tool_call_icon(action: str) -> str:
    for key, icon in TOOL_ICONS:
        if key in action:
            return get_icon(icon)
    return get_icon(_DEFAULT_TOOL_ICON)


# ── Result status ──

_STATUS_ICONS = MappingProxyType({
    ResultStatus.SUCCESS: "✅",
    ResultStatus.WARNING: "⚠️",
    ResultStatus.ERROR: "❌",
})
_STATUS_CLASSES = MappingProxyType({
    ResultStatus.SUCCESS: "text-green-400",
    ResultStatus.WARNING: "text-yellow-400",
    ResultStatus.ERROR: "text-red-400",
})
# Rich style names for terminal output
_STATUS_STYLES = MappingProxyType({
    ResultStatus.SUCCESS: "green",
    ResultStatus.WARNING: "yellow",
    ResultStatus.ERROR: "red",
})


def _as_status(status: StatusKey):
    if isinstance(status, ResultStatus):
        return status
    try:
        return ResultStatus(status)
    except ValueError:
        return None


def get_result_status_icon(status: StatusKey) -> str:
    return get_icon(_STATUS_ICONS.get(_as_status(status), "❓"))


def get_result_status_class(status: StatusKey) -> str:
    """CSS color class for a result status (``text-gray-400`` if unknown)."""
    return _STATUS_CLASSES.get(_as_status(status), "text-gray-400")


def get_result_status_style(status: StatusKey) -> str:
    return _STATUS_STYLES.get(_as_status(status), "dim")
