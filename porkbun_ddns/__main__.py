"""
Точка входа для запуска модуля.

    python -m porkbun_ddns [команда] [опции]

Примеры:
    python -m porkbun_ddns run
    python -m porkbun_ddns once --dry-run
    python -m porkbun_ddns ping
"""

from .cli import main

if __name__ == "__main__":
    main()
