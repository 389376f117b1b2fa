# Псевдо-платформы фильтра дохода: прямые брони по способу оплаты
DIRECT_BANK = 'directBank'
DIRECT_CASH = 'directCash'

MONTH_PATTERN = r'^\d{4}-\d{2}$'
