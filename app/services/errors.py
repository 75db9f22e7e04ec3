class GachaError(Exception):
    """Base class for failures of the draw engine.

    ``code`` is stable and safe to show to clients; ``status_code`` is the
    HTTP status the API layer answers with.
    """

    code = "gacha_error"
    status_code = 500
    message = "Gacha failure"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_detail(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


class NoCandidates(GachaError):
    code = "no_candidates"
    status_code = 404
    message = "No dishes available in this group"


class ItemVanished(GachaError):
    code = "item_vanished"
    status_code = 409
    message = "The drawn dish left the group before the draw was recorded"


class DrawUnavailable(GachaError):
    code = "draw_unavailable"
    status_code = 503
    message = "Draw could not be completed, try again"


class GroupAccessDenied(GachaError):
    code = "unauthorized"
    status_code = 403
    message = "Not authorized to use this group"


class InvalidGroupId(GachaError):
    code = "validation_error"
    status_code = 422
    message = "group_id must be a positive integer"


class DailyLimitReached(GachaError):
    code = "daily_limit_reached"
    status_code = 429
    message = "Daily draw limit reached"
