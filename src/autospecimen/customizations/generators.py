from __future__ import annotations

import threading
from datetime import date, datetime
from typing import Any

from autospecimen.customizations.registry import auto_register
from autospecimen.engine.base import NO_SPECIMEN, SpecimenEngine
from autospecimen.requests import is_request_for


@auto_register
class DateGenerator:
    def create(self, request: Any, context: SpecimenEngine) -> Any:
        if not is_request_for(request, date):
            return NO_SPECIMEN
        moment = context.resolve(datetime)
        return moment.date()


@auto_register
class EventGenerator:
    """Unset ``threading.Event`` instances, i.e. a cancellation signal not yet fired."""

    def create(self, request: Any, context: SpecimenEngine) -> Any:
        _ = context
        if not is_request_for(request, threading.Event):
            return NO_SPECIMEN
        return threading.Event()
