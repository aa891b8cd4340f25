"""MQTT diagnostic publisher for the Concept Map skill."""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional

import paho.mqtt.client as mqtt

_LOGGER = logging.getLogger(__name__)


class EventBus:
    """Publishes skill telemetry to MQTT diagnostic topics.

    The broker is optional. When it cannot be reached at start-up the bus stays
    offline: nothing is queued inside paho and every message is counted as
    dropped, so a missing broker never slows or breaks a voice response.
    """

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 1883,
        username: Optional[str] = None,
        password: Optional[str] = None,
        base_topic: str = "conceptmap",
        client_id: str = "conceptmap-eventbus",
    ) -> None:
        self._base_topic = base_topic.rstrip("/")
        self._dropped = 0
        self._online = False
        self._loop_running = False
        self._client = mqtt.Client(
            mqtt.CallbackAPIVersion.VERSION2,
            client_id=client_id,
            clean_session=True,
        )
        if username and password:
            self._client.username_pw_set(username, password)
        try:
            self._client.connect(host, port, keepalive=25)
        except OSError as exc:
            _LOGGER.warning("Telemetry broker %s:%s unavailable, telemetry disabled: %s", host, port, exc)
            return
        if self._client.loop_start() != mqtt.MQTT_ERR_SUCCESS:
            _LOGGER.warning("Telemetry network loop did not start, telemetry disabled")
            self._client.disconnect()
            return
        self._loop_running = True
        self._online = True

    @property
    def online(self) -> bool:
        return self._online

    @property
    def dropped(self) -> int:
        return self._dropped

    def topic_for(self, topic_suffix: str) -> str:
        return f"{self._base_topic}/{topic_suffix.lstrip('/')}"

    def publish(self, topic_suffix: str, payload: Dict[str, Any]) -> None:
        topic = self.topic_for(topic_suffix)
        if not self._online:
            self._dropped += 1
            return
        message = payload.copy()
        message.setdefault("ts", time.time())
        try:
            info = self._client.publish(topic, json.dumps(message, default=str), qos=0, retain=False)
        except Exception:
            self._dropped += 1
            _LOGGER.debug("Dropped telemetry message for %s", topic, exc_info=True)
            return
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            self._dropped += 1
            _LOGGER.debug("Telemetry publish to %s returned rc=%s", topic, info.rc)

    def close(self) -> None:
        """Stop the network loop and disconnect; safe to call more than once."""

        if self._loop_running:
            self._client.loop_stop()
            self._loop_running = False
        if self._online:
            self._client.disconnect()
            self._online = False


__all__ = ["EventBus"]
