from reply_suggest.models.reminder import ReminderRef, SuggestionRequest, Tone
from reply_suggest.models.suggestion import AttemptRecord, Suggestion, SuggestionResult

__all__ = [
    "AttemptRecord",
    "ReminderRef",
    "Suggestion",
    "SuggestionRequest",
    "SuggestionResult",
    "Tone",
]
