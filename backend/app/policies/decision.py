from dataclasses import dataclass

from app.core.errors import AuthorizationError


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(True)


def deny(reason: str | None = None) -> Decision:
    return Decision(False, reason)


def allow_if(condition: bool, reason: str | None = None) -> Decision:
    return ALLOW if condition else deny(reason)


def authorize(decision: Decision) -> None:
    if not decision:
        raise AuthorizationError(decision.reason)
