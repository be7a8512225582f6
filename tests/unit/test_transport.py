import json
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "printer_protocol"))

import serial

from thermalprint_printer import transport as transport_module
from thermalprint_printer.errors import TransportError, TransportUnavailable
from thermalprint_printer.transport import RecordingTransport, SerialTransport


class SerialTransportTests(unittest.TestCase):
    def _fake_port(self):
        port = MagicMock()
        port.is_open = True
        port.write.side_effect = lambda payload: len(payload)
        return port

    def test_probe_failure_is_unavailable(self):
        with patch.object(transport_module.serial, "Serial", side_effect=serial.SerialException("no such device")):
            with self.assertRaises(TransportUnavailable):
                SerialTransport("/dev/does-not-exist")

    def test_probe_opens_and_closes(self):
        port = self._fake_port()
        with patch.object(transport_module.serial, "Serial", return_value=port) as ctor:
            link = SerialTransport("/dev/ttyUSB0")
        self.assertFalse(link.is_open)
        port.close.assert_called_once()
        kwargs = ctor.call_args.kwargs
        self.assertEqual(kwargs["baudrate"], 9600)
        self.assertEqual(kwargs["port"], "/dev/ttyUSB0")

    def test_session_scopes_each_send(self):
        port = self._fake_port()
        with patch.object(transport_module.serial, "Serial", return_value=port) as ctor:
            link = SerialTransport("/dev/ttyUSB0", probe=False)
            with link.session():
                self.assertEqual(link.send(b"\x1b@"), 2)
            self.assertFalse(link.is_open)
            with link.session():
                link.send(b"\x0c")
        self.assertEqual(ctor.call_count, 2)
        self.assertEqual(port.close.call_count, 2)

    def test_send_failure_is_transport_error(self):
        port = self._fake_port()
        port.write.side_effect = serial.SerialTimeoutException("write timeout")
        with patch.object(transport_module.serial, "Serial", return_value=port):
            link = SerialTransport("/dev/ttyUSB0", probe=False)
            with self.assertRaises(TransportError):
                with link.session():
                    link.send(b"abc")
        self.assertFalse(link.is_open)

    def test_send_requires_open(self):
        link = SerialTransport("/dev/ttyUSB0", probe=False)
        with self.assertRaises(TransportError):
            link.send(b"x")


class RecordingTransportTests(unittest.TestCase):
    def test_records_frames_per_session(self):
        link = RecordingTransport()
        with link.session():
            link.send(b"\x1b@")
            link.send(b"hi")
        self.assertEqual(link.frames, [b"\x1b@", b"hi"])
        self.assertEqual(link.data, b"\x1b@hi")
        self.assertEqual(link.sessions, 1)
        with self.assertRaises(TransportError):
            link.send(b"late")

    def test_transcript(self):
        link = RecordingTransport()
        with link.session():
            link.send(bytes([27, 64]))
        with tempfile.TemporaryDirectory() as tmp:
            path = link.write_transcript(Path(tmp) / "out" / "t.jsonl")
            rows = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
        self.assertEqual(rows, [{"dir": "host_to_device", "payload_hex": "1B40"}])


if __name__ == "__main__":
    unittest.main()
