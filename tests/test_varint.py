import random
import unittest

from mcping.errors import IncompleteVarInt, MalformedVarInt
from mcping.varint import read_varint, write_varint


class TestWriteVarint(unittest.TestCase):
    def test_minimal_lengths(self):
        self.assertEqual(write_varint(0), b"\x00")
        self.assertEqual(len(write_varint(127)), 1)
        self.assertEqual(write_varint(128), b"\x80\x01")
        self.assertEqual(len(write_varint(2 ** 28)), 5)
        self.assertEqual(len(write_varint(2 ** 32 - 1)), 5)

    def test_known_encodings(self):
        self.assertEqual(write_varint(300), b"\xac\x02")
        self.assertEqual(write_varint(25565), b"\xdd\xc7\x01")

    def test_negative_is_twos_complement(self):
        # -1 is the "unknown protocol" handshake sentinel
        self.assertEqual(write_varint(-1), b"\xff\xff\xff\xff\x0f")

    def test_out_of_range(self):
        with self.assertRaises(ValueError):
            write_varint(2 ** 32)
        with self.assertRaises(ValueError):
            write_varint(-(2 ** 31) - 1)


class TestReadVarint(unittest.TestCase):
    def test_round_trip(self):
        rng = random.Random(1234)
        values = [0, 1, 127, 128, 255, 2 ** 14 - 1, 2 ** 14, 2 ** 21, 2 ** 28 - 1, 2 ** 28, 2 ** 31 - 1]
        values += [rng.randrange(2 ** 31) for _ in range(200)]
        for value in values:
            encoded = write_varint(value)
            self.assertEqual(read_varint(encoded), (value, len(encoded)))

    def test_offset(self):
        buffer = b"\xff" + write_varint(300) + b"rest"
        self.assertEqual(read_varint(buffer, 1), (300, 3))

    def test_truncated(self):
        with self.assertRaises(IncompleteVarInt):
            read_varint(b"\x80\x80")
        with self.assertRaises(IncompleteVarInt):
            read_varint(b"", 0)
        with self.assertRaises(IncompleteVarInt):
            read_varint(b"\x01", 1)

    def test_truncated_is_a_malformed_varint(self):
        self.assertTrue(issubclass(IncompleteVarInt, MalformedVarInt))

    def test_too_big(self):
        with self.assertRaises(MalformedVarInt) as ctx:
            read_varint(b"\x80\x80\x80\x80\x80\x01")
        self.assertNotIsInstance(ctx.exception, IncompleteVarInt)


if __name__ == "__main__":
    unittest.main()
