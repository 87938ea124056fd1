"""
Finance Settings - typed access to the finance dates options

Options are stored flat with the finance_ prefix:
- finance_enable_system: "1" / "0"
- finance_trigger_<status>: "1" / "0" per order status
- finance_dynamic_date_triggers: list of the statuses last saved as triggers
- finance_customer_visible_categories: list of category IDs
- finance_visibility_surfaces: list of surface identifiers

Author: TM3
Date: 2025-11-20
"""
from typing import Any, Dict, Iterable, List

from revenue_deferral.domain.order import ORDER_STATUSES, STATUS_PROCESSING
from revenue_deferral.repositories.option_repository import OptionStore

OPTION_PREFIX = 'finance_'

ENABLE_SYSTEM_OPTION = 'enable_system'
ELIGIBLE_CATEGORIES_OPTION = 'customer_visible_categories'
VISIBILITY_SURFACES_OPTION = 'visibility_surfaces'
TRIGGER_OPTION_PREFIX = 'trigger_'
TRIGGER_LIST_OPTION = 'dynamic_date_triggers'

# Surface identifiers
SURFACE_ORDER_CONFIRMATION = 'order_confirmation'
SURFACE_EMAILS = 'emails'
SURFACE_MY_ACCOUNT = 'my_account'
SURFACE_SUBSCRIPTIONS = 'subscriptions'
SURFACE_PDF_INVOICE = 'pdf_invoice'

SURFACES = (
    SURFACE_ORDER_CONFIRMATION,
    SURFACE_EMAILS,
    SURFACE_MY_ACCOUNT,
    SURFACE_SUBSCRIPTIONS,
    SURFACE_PDF_INVOICE,
)

_TRUTHY = {'1', 'yes', 'true', 'on'}


def is_truthy_option(value: Any) -> bool:
    """Interpret a stored checkbox option ("1", "yes", True, 1...)"""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return False


def _trigger_option(status: str) -> str:
    return f"{TRIGGER_OPTION_PREFIX}{status}"


class FinanceSettings:
    """
    Settings facade for the finance dates feature

    The processing status is always a trigger; that is applied when the
    options are read and cannot be switched off through storage.
    """

    def __init__(self, store: OptionStore):
        self.store = store

    def _get(self, name: str, default: Any = None) -> Any:
        return self.store.get(OPTION_PREFIX + name, default)

    def _update(self, name: str, value: Any) -> bool:
        return self.store.update(OPTION_PREFIX + name, value)

    def is_system_enabled(self) -> bool:
        return is_truthy_option(self._get(ENABLE_SYSTEM_OPTION, '0'))

    def is_trigger_status(self, status: str) -> bool:
        if status == STATUS_PROCESSING:
            return True

        return is_truthy_option(self._get(_trigger_option(status), '0'))

    def _known_trigger_statuses(self) -> List[str]:
        """Built-in order statuses followed by any custom status saved as a trigger"""
        statuses = list(ORDER_STATUSES)

        saved = self._get(TRIGGER_LIST_OPTION, [])
        if isinstance(saved, list):
            statuses.extend(s for s in saved if isinstance(s, str) and s and s not in statuses)

        return statuses

    def get_dynamic_date_triggers(self) -> List[str]:
        """Order statuses that trigger dynamic dates, processing always included"""
        return [status for status in self._known_trigger_statuses() if self.is_trigger_status(status)]

    def get_eligible_categories(self) -> List[int]:
        categories = self._get(ELIGIBLE_CATEGORIES_OPTION, [])

        if not isinstance(categories, list):
            return []

        eligible = []
        for category_id in categories:
            try:
                eligible.append(int(category_id))
            except (TypeError, ValueError):
                continue
        return eligible

    def get_visibility_surfaces(self) -> List[str]:
        surfaces = self._get(VISIBILITY_SURFACES_OPTION, [])

        if not isinstance(surfaces, list):
            return []

        return [surface for surface in surfaces if isinstance(surface, str)]

    def is_surface_enabled(self, surface: str) -> bool:
        return surface in self.get_visibility_surfaces()

    def set_system_enabled(self, enabled: bool) -> bool:
        return self._update(ENABLE_SYSTEM_OPTION, '1' if enabled else '0')

    def save_eligible_categories(self, category_ids: Iterable[Any]) -> bool:
        return self._update(ELIGIBLE_CATEGORIES_OPTION, [int(category_id) for category_id in category_ids])

    def save_visibility_surfaces(self, surfaces: Iterable[str]) -> bool:
        return self._update(VISIBILITY_SURFACES_OPTION, [s for s in surfaces if s in SURFACES])

    def save_dynamic_date_triggers(self, statuses: Iterable[str]) -> bool:
        """
        Store the trigger statuses

        Any status is accepted, not only the built-in ones. Every status
        known before the save gets its flag rewritten so that one left out
        of the new list is switched off; processing is always stored on.
        """
        selected = [STATUS_PROCESSING]
        for status in statuses:
            status = status.strip() if isinstance(status, str) else ''
            if status and status not in selected:
                selected.append(status)

        known = self._known_trigger_statuses()
        flags = known + [status for status in selected if status not in known]

        success = self._update(TRIGGER_LIST_OPTION, selected)
        for status in flags:
            if not self._update(_trigger_option(status), '1' if status in selected else '0'):
                success = False
        return success

    def get_defaults(self) -> Dict[str, Any]:
        return {
            'enable_system': False,
            'eligible_categories': [],
            'visibility_surfaces': [],
            'dynamic_date_triggers': [STATUS_PROCESSING],
        }

    def reset_to_defaults(self) -> bool:
        defaults = self.get_defaults()
        results = [
            self.set_system_enabled(defaults['enable_system']),
            self.save_eligible_categories(defaults['eligible_categories']),
            self.save_visibility_surfaces(defaults['visibility_surfaces']),
            self.save_dynamic_date_triggers(defaults['dynamic_date_triggers']),
        ]
        return all(results)

    def get_all(self) -> Dict[str, Any]:
        return {
            'enable_system': self.is_system_enabled(),
            'eligible_categories': self.get_eligible_categories(),
            'visibility_surfaces': self.get_visibility_surfaces(),
            'dynamic_date_triggers': self.get_dynamic_date_triggers(),
        }
