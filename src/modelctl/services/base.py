"""BaseService — shared foundation for modelctl services.

Every service receives the frozen :class:`ModelctlSettings` at
construction time and reads its configuration sections from it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from modelctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from modelctl.config.settings import ModelctlSettings


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class ValidationService(BaseService):
            def validate(self, path: Path) -> ServiceResult:
                config = self._settings.validation
                ...
    """

    def __init__(self, settings: ModelctlSettings | None = None) -> None:
        if settings is None:
            from modelctl.config.settings import ModelctlSettings

            settings = ModelctlSettings()
        self._settings = settings

    @property
    def settings(self) -> ModelctlSettings:
        return self._settings

    @staticmethod
    def _failure(
        op: str,
        code: str,
        message: str,
        *,
        detail: dict[str, Any] | None = None,
    ) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail or {}),
        )
