import logging
from typing import Any

from colorama import Fore, Style


class ComponentFilter(logging.Filter):
    """Фильтр для добавления компонента системы в логи.

    Добавляет plain и colored версии компонента в запись лога.
    Компонент берется из extra={'component': ...}, иначе выводится
    из имени логгера (app.booking -> BOOKING).
    """

    COMPONENT_COLOR = {
        'API': Fore.GREEN,
        'BOOKING': Fore.YELLOW,
        'INCOME': Fore.BLUE,
        'CACHE': Fore.CYAN,
        'TASKS': Fore.MAGENTA,
    }

    def filter(self, record: Any) -> bool:
        """Добавляет информацию о компоненте в запись лога.

        Args:
            record: Запись лога

        Returns:
            True (фильтр всегда пропускает записи)

        """
        component = getattr(record, 'component', None)

        if not isinstance(component, str) or not component.strip():
            _, _, suffix = record.name.partition('.')
            component = suffix or 'API'

        component = component.strip().upper()
        color = self.COMPONENT_COLOR.get(component, Fore.WHITE)
        record.component_plain = component
        record.component_colored = f'{color}{component}{Style.RESET_ALL}'
        return True
