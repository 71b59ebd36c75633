"""Repository implementations for sensors and security status."""

import os
import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator, Optional, Set

from ..models.security import Sensor, AlarmStatus, ArmingStatus
from .interfaces import SecurityRepositoryInterface
from .error_handler import RepositoryError
from ..config.defaults import DEFAULT_PATHS
from ..utils import ensure_directory_exists
from ..logging_config import get_logger

logger = get_logger("repository")

ALARM_STATUS_KEY = "alarm_status"
ARMING_STATUS_KEY = "arming_status"


class InMemorySecurityRepository(SecurityRepositoryInterface):
    """Repository that keeps everything in process memory."""

    def __init__(self,
                 alarm_status: AlarmStatus = AlarmStatus.NO_ALARM,
                 arming_status: ArmingStatus = ArmingStatus.DISARMED):
        self._sensors: Set[Sensor] = set()
        self._alarm_status = alarm_status
        self._arming_status = arming_status
        self._lock = threading.Lock()

    def get_sensors(self) -> Set[Sensor]:
        # Copy so callers can iterate while sensors are added or removed
        with self._lock:
            return set(self._sensors)

    def add_sensor(self, sensor: Sensor) -> None:
        with self._lock:
            self._sensors.add(sensor)

    def remove_sensor(self, sensor: Sensor) -> None:
        with self._lock:
            self._sensors.discard(sensor)

    def update_sensor(self, sensor: Sensor) -> None:
        with self._lock:
            self._sensors.discard(sensor)
            self._sensors.add(sensor)

    def get_alarm_status(self) -> AlarmStatus:
        return self._alarm_status

    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        self._alarm_status = alarm_status

    def get_arming_status(self) -> ArmingStatus:
        return self._arming_status

    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        self._arming_status = arming_status


class SqliteSecurityRepository(SecurityRepositoryInterface):
    """Repository backed by a SQLite database file. Last write wins."""

    def __init__(self, database_path: str = DEFAULT_PATHS["database_file"]):
        """
        Initialize the SQLite repository.

        Args:
            database_path: Path to SQLite database file. Parent directories
                are created when missing.
        """
        self.database_path = database_path
        self._initialize_database()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection for one unit of work, commit or roll back, then close."""
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _initialize_database(self) -> None:
        """Create the sensors and status tables."""
        ensure_directory_exists(os.path.dirname(self.database_path))

        try:
            with self._connect() as conn:
                cursor = conn.cursor()

                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS sensors (
                        name TEXT NOT NULL,
                        sensor_type TEXT NOT NULL,
                        active INTEGER NOT NULL DEFAULT 0,
                        PRIMARY KEY (name, sensor_type)
                    )
                """)

                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS status (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                """)

                logger.debug(f"Database initialized: {self.database_path}")

        except sqlite3.Error as e:
            logger.error(f"Failed to initialize database: {e}")
            raise RepositoryError(f"Failed to initialize database {self.database_path}: {e}") from e

    def get_sensors(self) -> Set[Sensor]:
        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT name, sensor_type, active FROM sensors")

                return {Sensor.from_dict(dict(row)) for row in cursor.fetchall()}

        except sqlite3.Error as e:
            logger.error(f"Failed to read sensors: {e}")
            raise RepositoryError(f"Failed to read sensors: {e}") from e

    def add_sensor(self, sensor: Sensor) -> None:
        self._write_sensor(sensor)
        logger.debug(f"Sensor stored: {sensor.name} ({sensor.sensor_type.value})")

    def update_sensor(self, sensor: Sensor) -> None:
        self._write_sensor(sensor)

    def remove_sensor(self, sensor: Sensor) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    "DELETE FROM sensors WHERE name = ? AND sensor_type = ?",
                    (sensor.name, sensor.sensor_type.value)
                )

        except sqlite3.Error as e:
            logger.error(f"Failed to remove sensor {sensor.name}: {e}")
            raise RepositoryError(f"Failed to remove sensor {sensor.name}: {e}") from e

    def _write_sensor(self, sensor: Sensor) -> None:
        try:
            with self._connect() as conn:
                conn.execute("""
                    INSERT OR REPLACE INTO sensors (name, sensor_type, active)
                    VALUES (:name, :sensor_type, :active)
                """, sensor.to_dict())

        except sqlite3.Error as e:
            logger.error(f"Failed to write sensor {sensor.name}: {e}")
            raise RepositoryError(f"Failed to write sensor {sensor.name}: {e}") from e

    def get_alarm_status(self) -> AlarmStatus:
        value = self._read_status(ALARM_STATUS_KEY)
        return AlarmStatus(value) if value else AlarmStatus.NO_ALARM

    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        self._write_status(ALARM_STATUS_KEY, alarm_status.value)

    def get_arming_status(self) -> ArmingStatus:
        value = self._read_status(ARMING_STATUS_KEY)
        return ArmingStatus(value) if value else ArmingStatus.DISARMED

    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        self._write_status(ARMING_STATUS_KEY, arming_status.value)

    def _read_status(self, key: str) -> Optional[str]:
        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT value FROM status WHERE key = ?", (key,))
                row = cursor.fetchone()
                return row[0] if row else None

        except sqlite3.Error as e:
            logger.error(f"Failed to read {key}: {e}")
            raise RepositoryError(f"Failed to read {key}: {e}") from e

    def _write_status(self, key: str, value: str) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT OR REPLACE INTO status (key, value) VALUES (?, ?)",
                    (key, value)
                )

        except sqlite3.Error as e:
            logger.error(f"Failed to write {key}: {e}")
            raise RepositoryError(f"Failed to write {key}: {e}") from e
