#!/usr/bin/env python3
"""Command-line front end for the CatPoint security system."""

import argparse
import functools
import os
import sys
from typing import List, Optional

from .config_manager import ConfigManager
from .logging_config import get_logger, setup_logging
from .models.security import AlarmStatus, ArmingStatus, Sensor, SensorType
from .services.error_handler import RepositoryError, global_error_handler
from .services.image_service import LazyImageService, create_image_service
from .services.notification_service import StatusHistoryListener
from .services.security_service import SecurityService
from .services.storage_service import SqliteSecurityRepository
from .utils import load_frame

logger = get_logger("cli")

ARM_MODES = {
    "home": ArmingStatus.ARMED_HOME,
    "away": ArmingStatus.ARMED_AWAY,
}


class CommandError(Exception):
    """A command could not be carried out because of user input."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="catpoint", description="CatPoint home security")
    parser.add_argument("--config", default=None, help="path to the JSON configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", help="log to the console")

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("status", help="show arming status, alarm status and sensors")

    arm = commands.add_parser("arm", help="arm the system")
    arm.add_argument("mode", choices=sorted(ARM_MODES))

    commands.add_parser("disarm", help="disarm the system")

    sensor = commands.add_parser("sensor", help="manage sensors")
    sensor_commands = sensor.add_subparsers(dest="sensor_command", required=True)

    add = sensor_commands.add_parser("add", help="add a sensor")
    add.add_argument("name")
    add.add_argument("type", choices=[t.value for t in SensorType])

    remove = sensor_commands.add_parser("remove", help="remove a sensor")
    remove.add_argument("name")

    set_state = sensor_commands.add_parser("set", help="activate or deactivate a sensor")
    set_state.add_argument("name")
    set_state.add_argument("state", choices=["on", "off"])

    scan = commands.add_parser("scan", help="process a camera image")
    scan.add_argument("image")

    return parser


def _find_sensor(service: SecurityService, name: str) -> Sensor:
    for sensor in service.get_sensors():
        if sensor.name == name:
            return sensor
    raise CommandError(f"Unknown sensor: {name}")


def _print_status(service: SecurityService) -> None:
    arming_status = service.get_arming_status()
    alarm_status = service.get_alarm_status()
    print(f"Arming status: {arming_status.name} ({arming_status.description})")
    print(f"Alarm status:  {alarm_status.name} ({alarm_status.description})")

    sensors = sorted(service.get_sensors(), key=lambda s: s.name)
    if not sensors:
        print("No sensors")
    for sensor in sensors:
        state = "active" if sensor.active else "inactive"
        print(f"  {sensor.name:<20} {sensor.sensor_type.value:<8} {state}")


def run_command(args: argparse.Namespace, service: SecurityService) -> None:
    """Carry out one parsed command against the security service."""
    if args.command == "status":
        _print_status(service)

    elif args.command == "arm":
        service.set_arming_status(ARM_MODES[args.mode])

    elif args.command == "disarm":
        service.set_arming_status(ArmingStatus.DISARMED)

    elif args.command == "sensor":
        if args.sensor_command == "add":
            if any(s.name == args.name for s in service.get_sensors()):
                raise CommandError(f"Sensor already exists: {args.name}")
            service.add_sensor(Sensor(args.name, SensorType(args.type)))
            print(f"Added sensor {args.name}")

        elif args.sensor_command == "remove":
            service.remove_sensor(_find_sensor(service, args.name))
            print(f"Removed sensor {args.name}")

        elif args.sensor_command == "set":
            sensor = _find_sensor(service, args.name)
            if service.get_alarm_status() == AlarmStatus.ALARM:
                print("Alarm active: sensor changes are ignored")
            updated = service.change_sensor_activation_status(sensor, args.state == "on")
            print(f"Sensor {updated.name} is {'active' if updated.active else 'inactive'}")

    elif args.command == "scan":
        try:
            frame = load_frame(args.image)
        except (FileNotFoundError, ValueError) as e:
            raise CommandError(str(e)) from e
        try:
            service.process_image(frame)
        except (FileNotFoundError, ValueError) as e:
            raise CommandError(f"Image service unavailable: {e}") from e
        print(f"Cat detected: {'yes' if service.cat_detected else 'no'}")


def _report_component_errors(log_dir: str) -> None:
    """Warn about components that recorded errors during this run."""
    health = global_error_handler.get_component_health()
    for name, count in sorted(global_error_handler.component_error_counts.items()):
        if not count:
            continue
        message = f"Warning: {count} error(s) in {name} ({health[name].value})"
        last_error = global_error_handler.get_last_error(name)
        if last_error is not None:
            message += f", last: {last_error.error_type}: {last_error.error}"
        print(f"{message}; see {os.path.join(log_dir, 'errors.log')}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    config_manager = ConfigManager(args.config)
    if not config_manager.validate_config():
        print(f"Invalid configuration: {config_manager.config_path}", file=sys.stderr)
        return 1
    config = config_manager.get_config()

    setup_logging(config.log_level, config.log_dir, console=args.verbose)
    global_error_handler.reset_error_counts()

    try:
        repository = SqliteSecurityRepository(config.database_path)
    except (RepositoryError, OSError) as e:
        logger.error(f"Startup failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Only scan needs a detector
    image_service = LazyImageService(functools.partial(create_image_service, config))
    service = SecurityService(repository, image_service)
    history = StatusHistoryListener(max_events=config.history_size)
    service.add_status_listener(history)

    try:
        run_command(args, service)
    except (CommandError, RepositoryError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        _report_component_errors(config.log_dir)

    for event in history.get_events():
        print(event.describe())

    return 0


if __name__ == "__main__":
    sys.exit(main())
