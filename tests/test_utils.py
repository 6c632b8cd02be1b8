import unittest

from mcping.utils import clean_motd, flatten_description, parse_address


class TestParseAddress(unittest.TestCase):
    def test_default_port(self):
        self.assertEqual(parse_address("play.example.com", 25565), ("play.example.com", 25565))
        self.assertEqual(parse_address("1.2.3.4", 19132), ("1.2.3.4", 19132))

    def test_explicit_port(self):
        self.assertEqual(parse_address("play.example.com:25570", 25565), ("play.example.com", 25570))
        self.assertEqual(parse_address(" 1.2.3.4:19133 ", 19132), ("1.2.3.4", 19133))

    def test_ipv6(self):
        self.assertEqual(parse_address("[::1]:25570", 25565), ("::1", 25570))
        self.assertEqual(parse_address("[::1]", 25565), ("::1", 25565))
        self.assertEqual(parse_address("2001:db8::1", 25565), ("2001:db8::1", 25565))

    def test_invalid(self):
        for address in ("", "host:port", "host:0", "host:70000", "[::1", "[::1]x"):
            with self.assertRaises(ValueError, msg=address):
                parse_address(address, 25565)


class TestDescription(unittest.TestCase):
    def test_plain_string(self):
        self.assertEqual(flatten_description("A server"), "A server")

    def test_chat_component(self):
        description = {"text": "Hello ", "extra": [{"text": "world", "color": "red"}, "!"]}
        self.assertEqual(flatten_description(description), "Hello world!")

    def test_extra_not_a_list(self):
        self.assertEqual(flatten_description({"text": "hi", "extra": None}), "hi")
        self.assertEqual(flatten_description({"text": "hi", "extra": 5}), "hi")

    def test_missing(self):
        self.assertEqual(flatten_description(None), "")

    def test_clean_motd(self):
        self.assertEqual(clean_motd("§aWelcome   to §lthe\tserver "), "Welcome to the\tserver")


if __name__ == "__main__":
    unittest.main()
