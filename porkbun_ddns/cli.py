"""
CLI модуль porkbun_ddns.

Команды:
- run: проверка ключей, затем бесконечный цикл обновления (по умолчанию)
- once: один цикл обновления (--dry-run: только показать решения)
- ping: проверка ключей Porkbun API
- check-config: показать итоговую конфигурацию

Примеры использования:
    python -m porkbun_ddns run
    python -m porkbun_ddns -c config.yaml once --dry-run
    python -m porkbun_ddns --json-logs run
"""

import argparse
import sys
import time
from typing import Callable, List, Optional

from .config import load_config, mask_secret
from .core.config_schema import AppConfig, LoggingConfig
from .core.context import RunContext, set_current_context
from .core.domain.names import is_fqdn_valid
from .core.exceptions import ConfigError, PorkbunError, format_error_for_log
from .core.logging import get_logger, setup_logging_from_config
from .sync.records import RecordSync

logger = get_logger(__name__)


def setup_parser() -> argparse.ArgumentParser:
    """
    Создаёт парсер аргументов командной строки.

    Returns:
        ArgumentParser: Настроенный парсер
    """
    parser = argparse.ArgumentParser(
        prog="porkbun_ddns",
        description="Обновление A/AAAA записей Porkbun по текущему WAN адресу (FRITZ!Box / хост)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Переменные окружения:
  APIKEY, SECRETKEY      ключи Porkbun API
  DOMAINS                домены через запятую (home.example.com,example.com)
  IPV4                   true | false (default: true)
  IPV6                   false | fritzbox-ip | host-ip | prefix-only (default: false)
  TIMEOUT                пауза между циклами в секундах (default: 600)

Примеры:
  %(prog)s run
  %(prog)s once --dry-run
  %(prog)s -c config.yaml check-config
        """,
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Подробный вывод (DEBUG)",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Путь к файлу конфигурации YAML (default: config.yaml)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Логи в формате JSON",
    )

    subparsers = parser.add_subparsers(dest="command", help="Команды")

    subparsers.add_parser("run", help="Бесконечный цикл обновления")

    once_parser = subparsers.add_parser("once", help="Один цикл обновления")
    once_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Только показать решения, записи не менять",
    )

    subparsers.add_parser("ping", help="Проверить ключи Porkbun API")
    subparsers.add_parser("check-config", help="Показать итоговую конфигурацию")

    return parser


def configure_logging(args: argparse.Namespace, config: Optional[AppConfig] = None) -> None:
    """
    Настраивает логирование из конфигурации и флагов CLI.

    -v поднимает уровень до DEBUG, --json-logs включает JSON и на консоли,
    и в файле (если он задан).
    """
    log_config = config.logging if config else LoggingConfig()
    if args.verbose:
        log_config = log_config.model_copy(update={"level": "DEBUG"})
    if args.json_logs:
        log_config = log_config.model_copy(update={"json_format": True})

    setup_logging_from_config(log_config, console_json=args.json_logs)


def run_forever(
    sync: RecordSync,
    interval: int,
    sleep: Callable[[float], None] = time.sleep,
    max_cycles: Optional[int] = None,
) -> None:
    """
    Цикл: обновление, пауза interval секунд, и так далее.

    Ошибка одного цикла не останавливает следующий.

    Args:
        sync: Синхронизатор
        interval: Пауза между циклами (секунды)
        sleep: Функция паузы (подменяется в тестах)
        max_cycles: Ограничение количества циклов (None = бесконечно)
    """
    cycle = 0
    while max_cycles is None or cycle < max_cycles:
        ctx = RunContext.create(triggered_by="loop")
        set_current_context(ctx)
        try:
            sync.run_cycle(ctx)
        except Exception:
            logger.exception("Непредвиденная ошибка в цикле обновления")
        finally:
            set_current_context(None)

        cycle += 1
        logger.info(f"Ожидание {interval} секунд")
        sleep(interval)


def _ping(sync: RecordSync) -> bool:
    try:
        your_ip = sync.client.ping()
    except PorkbunError as e:
        logger.error(f"Ключи Porkbun API не прошли проверку: {format_error_for_log(e)}")
        return False
    logger.info(f"Ключи Porkbun API проверены (yourIp={your_ip})")
    return True


def cmd_run(args: argparse.Namespace, config: AppConfig) -> int:
    """Проверяет ключи и запускает бесконечный цикл."""
    from . import build_sync

    sync = build_sync(config)
    if not _ping(sync):
        return 1

    logger.info(
        f"Запуск: {len(config.update.domains)} домен(ов), "
        f"IPv4={config.update.ipv4_mode.value}, IPv6={config.update.ipv6.value}, "
        f"интервал {config.update.interval}s"
    )
    run_forever(sync, config.update.interval)
    return 0


def cmd_once(args: argparse.Namespace, config: AppConfig) -> int:
    """Один цикл. Код возврата 1, если что-то не удалось."""
    from . import build_sync

    ctx = RunContext.create(dry_run=getattr(args, "dry_run", False), triggered_by="once")
    set_current_context(ctx)
    try:
        report = build_sync(config).run_cycle(ctx)
    finally:
        set_current_context(None)

    print(report.summary())
    return 1 if report.has_failures else 0


def cmd_ping(args: argparse.Namespace, config: AppConfig) -> int:
    """Проверка ключей API."""
    from . import build_sync

    return 0 if _ping(build_sync(config)) else 1


def cmd_check_config(args: argparse.Namespace, config: AppConfig) -> int:
    """Печатает итоговую конфигурацию (секреты замаскированы)."""
    data = config.model_dump(mode="json")
    data["porkbun"]["api_key"] = mask_secret(data["porkbun"]["api_key"])
    data["porkbun"]["secret_key"] = mask_secret(data["porkbun"]["secret_key"])

    import yaml
    print(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), end="")

    invalid = [d for d in config.update.domains if not is_fqdn_valid(d)]
    for domain in invalid:
        print(f"✗ {domain}: невалидный домен, цикл будет останавливаться на нём")
    return 1 if invalid else 0


COMMANDS = {
    "run": cmd_run,
    "once": cmd_once,
    "ping": cmd_ping,
    "check-config": cmd_check_config,
}


def main(argv: Optional[List[str]] = None) -> None:
    """Главная функция CLI."""
    parser = setup_parser()
    args = parser.parse_args(argv)
    command = args.command or "run"

    try:
        config = load_config(args.config)
    except ConfigError as e:
        configure_logging(args)
        logger.error(format_error_for_log(e))
        sys.exit(2)

    configure_logging(args, config)

    try:
        code = COMMANDS[command](args, config)
    except KeyboardInterrupt:
        logger.info("Остановлено пользователем")
        code = 130

    sys.exit(code)
