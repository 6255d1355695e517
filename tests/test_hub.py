import asyncio
import json

from sensorfusion.fusion import FusedThreat
from sensorfusion.hub import ThreatMessage, WebSocketHub


def make_threat(**overrides):
    values = dict(
        id=7,
        x=12.5,
        y=40.25,
        level=4,
        confidence=0.85,
        sensor_count=3,
        last_seen=0.0,
    )
    values.update(overrides)
    return FusedThreat(**values)


class RecordingClient:
    def __init__(self):
        self.sent = []

    async def send(self, data):
        self.sent.append(data)


class FailingClient:
    def __init__(self):
        self.attempts = 0

    async def send(self, data):
        self.attempts += 1
        raise OSError("connection reset")


class FakeConnection:
    def __init__(self, hub, messages):
        self.hub = hub
        self.messages = list(messages)
        self.registered_while_open = None
        self.received = []
        self.closed = False
        self.remote_address = ("127.0.0.1", 40000)

    def __aiter__(self):
        return self._messages()

    async def _messages(self):
        self.registered_while_open = self in self.hub.clients
        for message in self.messages:
            self.received.append(message)
            yield message

    async def close(self):
        self.closed = True


def test_message_from_threat_copies_fields():
    threat = make_threat()
    message = ThreatMessage.from_threat(threat)
    assert message.type == "threat_update"
    assert message.id == threat.id
    assert message.x == threat.x
    assert message.y == threat.y
    assert message.level == threat.level
    assert message.confidence == threat.confidence
    assert message.sensors == threat.sensor_count


def test_message_json_has_source_field_names_in_order():
    decoded = json.loads(ThreatMessage.from_threat(make_threat()).to_json())
    assert list(decoded) == ["type", "id", "x", "y", "level", "confidence", "sensors"]
    assert decoded["type"] == "threat_update"
    assert decoded["sensors"] == 3
    assert decoded["x"] == 12.5


def test_message_json_round_trip():
    message = ThreatMessage.from_threat(make_threat(id=2, x=99.0, y=1.0))
    assert ThreatMessage(**json.loads(message.to_json())) == message


def test_add_and_remove_clients():
    hub = WebSocketHub()
    first, second = RecordingClient(), RecordingClient()
    hub.add_client(first)
    hub.add_client(second)
    hub.add_client(first)
    assert hub.clients == {first, second}
    hub.remove_client(first)
    assert hub.clients == {second}
    hub.remove_client(first)
    assert hub.clients == {second}


def test_broadcast_reaches_every_client():
    hub = WebSocketHub()
    clients = [RecordingClient(), RecordingClient()]
    for client in clients:
        hub.add_client(client)
    threat = make_threat()
    asyncio.run(hub.broadcast_threat(threat))
    expected = ThreatMessage.from_threat(threat).to_json()
    assert [client.sent for client in clients] == [[expected], [expected]]


def test_broadcast_survives_failing_client():
    hub = WebSocketHub()
    failing, healthy = FailingClient(), RecordingClient()
    hub.add_client(failing)
    hub.add_client(healthy)
    asyncio.run(hub.broadcast_threat(make_threat()))
    assert failing.attempts == 1
    assert len(healthy.sent) == 1
    assert hub.clients == {failing, healthy}


def test_broadcast_without_clients_sends_nothing():
    hub = WebSocketHub()
    asyncio.run(hub.broadcast_threat(make_threat()))
    assert hub.clients == set()


def test_handle_connection_registers_then_removes_and_closes():
    hub = WebSocketHub()
    connection = FakeConnection(hub, ["hello", "ping"])
    asyncio.run(hub.handle_connection(connection))
    assert connection.registered_while_open is True
    assert connection.received == ["hello", "ping"]
    assert connection.closed is True
    assert connection not in hub.clients


def test_connected_client_receives_broadcast_until_it_leaves():
    hub = WebSocketHub()

    class ListeningConnection(FakeConnection):
        def __init__(self, hub):
            super().__init__(hub, [])
            self.sent = []

        async def send(self, data):
            self.sent.append(data)

        async def _messages(self):
            await self.hub.broadcast_threat(make_threat(id=11))
            yield "bye"

    connection = ListeningConnection(hub)
    asyncio.run(hub.handle_connection(connection))
    assert [json.loads(item)["id"] for item in connection.sent] == [11]
    assert hub.clients == set()