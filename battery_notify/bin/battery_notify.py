#!/usr/bin/env python3
#
# battery-notify - Desktop notifications for charger and battery level changes

import logging
import sys

import click

from battery_notify.config.config import find_config_file, load_settings
from battery_notify.core import install_signal_handlers, run_daemon
from battery_notify.errors import AlreadyRunningError, BatteryNotifyError, ConfigError
from battery_notify.globals import PROG_NAME, VERSION
from battery_notify.modules.lock import PidFile
from battery_notify.tools import setup_logger


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--config", required=False, metavar="PATH", help="Use config file at defined path")
@click.option("--debug", is_flag=True, help="Log every monitored event")
@click.option("--version", is_flag=True, help="Show currently installed version")
def main(config, debug, version):
    """Notify about charger and battery level changes reported by UPower."""
    if version:
        click.echo(f"{PROG_NAME} {VERSION}")
        sys.exit(0)

    config_path = find_config_file(config)
    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        setup_logger(debug=debug)
        logging.error("Invalid config %s: %s", config_path, e)
        sys.exit(2)

    setup_logger(settings.log_to, debug)
    if settings.path: logging.info("Loaded config from %s", settings.path)
    else: logging.info("No config file at %s, using defaults", config_path)

    install_signal_handlers()
    try:
        code = run_daemon(settings, PidFile())
    except AlreadyRunningError as e:
        logging.info("%s", e)
        sys.exit(0)
    except BatteryNotifyError as e:
        logging.error("%s", e)
        sys.exit(2)
    except KeyboardInterrupt:
        logging.info("Interrupted, stopping")
        sys.exit(0)
    sys.exit(code)


if __name__ == "__main__":
    main()
