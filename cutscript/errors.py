"""Error classification for script interpretation.

Every failure the interpreter can recover from is a ScriptError; the
class-level ``code`` is what structured output reports.
"""


class ScriptError(Exception):
    code = "UNKNOWN"
    suggestion = "Check the error message for details."


class MediaUnavailable(ScriptError):
    """The media file is missing or its duration could not be read."""
    code = "MEDIA_UNAVAILABLE"
    suggestion = "Check that the LOAD path exists and that ffprobe can read it."


class NoSegmentAtTime(ScriptError):
    """CUT points at a time no segment covers."""
    code = "NO_SEGMENT"
    suggestion = "CUT must fall inside a loaded segment."


class DegenerateCut(ScriptError):
    """CUT lands exactly on a segment boundary."""
    code = "DEGENERATE_CUT"
    suggestion = "The timeline is already cut here; remove the duplicate CUT."


class MissingField(ScriptError):
    code = "MISSING_FIELD"
    suggestion = "Check the command syntax."


class LoadCancelled(ScriptError):
    """A duration lookup finished after the document changed again."""
    code = "CANCELLED"
    suggestion = "The script changed while loading; it will be re-evaluated."


def error_response(e: Exception, context: str = "") -> dict:
    """
    Create a standardized error dict from an exception.

    Exceptions that are not ScriptErrors are reported with code UNKNOWN.
    """
    code = e.code if isinstance(e, ScriptError) else ScriptError.code
    suggestion = e.suggestion if isinstance(e, ScriptError) else ScriptError.suggestion
    error_msg = f"{context}: {e}" if context else str(e)

    return {
        "success": False,
        "error": error_msg,
        "code": code,
        "suggestion": suggestion,
    }
