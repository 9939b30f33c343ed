import io
import string

import pytest

from dicecore.executor import ResultRow
from dicecore.objects import Obj
from dicecore.queueref import QueueElement
from dicecore.resp import IO_BUFFER_LENGTH, RESP_NIL, RESPParser, RESPProtocolError, encode
from dicecore.stackref import StackElement
from dicecore.store import WatchEvent


class ChunkReader:
    """Hands out one prepared chunk per read, cut to the requested size."""

    def __init__(self, chunks=()):
        self.chunks = list(chunks)
        self.index = 0

    def read(self, size):
        if self.index >= len(self.chunks):
            return b""
        chunk = self.chunks[self.index][:size]
        self.index += 1
        return chunk


def decode(data: bytes):
    return RESPParser(io.BytesIO(data)).decode_one()


def growing_strings():
    text = ""
    for i in range(1024):
        text += string.ascii_lowercase[i % 26]
        yield text


def test_simple_string_decode():
    assert decode(b"+OK\r\n") == "OK"


def test_error_decode():
    assert decode(b"-Error message\r\n") == "Error message"


@pytest.mark.parametrize("data, expected", [(b":0\r\n", 0), (b":1000\r\n", 1000)])
def test_int64_decode(data, expected):
    assert decode(data) == expected


@pytest.mark.parametrize("data, expected", [(b"$5\r\nhello\r\n", "hello"), (b"$0\r\n\r\n", "")])
def test_bulk_string_decode(data, expected):
    assert decode(data) == expected


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"*0\r\n", []),
        (b"*2\r\n$5\r\nhello\r\n$5\r\nworld\r\n", ["hello", "world"]),
        (b"*3\r\n:1\r\n:2\r\n:3\r\n", [1, 2, 3]),
        (b"*5\r\n:1\r\n:2\r\n:3\r\n:4\r\n$5\r\nhello\r\n", [1, 2, 3, 4, "hello"]),
        (
            b"*2\r\n*3\r\n:1\r\n:2\r\n:3\r\n*2\r\n+Hello\r\n-World\r\n",
            [[1, 2, 3], ["Hello", "World"]],
        ),
    ],
)
def test_array_decode(data, expected):
    assert decode(data) == expected


def test_simple_strings_round_trip():
    for text in growing_strings():
        assert decode(encode(text, True)) == text


def test_bulk_strings_round_trip():
    for text in growing_strings():
        assert decode(encode(text, False)) == text


@pytest.mark.parametrize(
    "value",
    [-(2**7), -(2**15), -(2**31), -(2**63), 0, 2**7 - 1, 2**15 - 1, 2**31 - 1, 2**63 - 1],
)
def test_int_round_trip(value):
    assert decode(encode(value, False)) == value


def test_decode_multiple():
    parser = RESPParser(ChunkReader([b"+OK\r\n+PONG\r\n"]))
    assert parser.decode_multiple() == ["OK", "PONG"]


def test_decode_one_cross_protocol_scripting():
    parser = RESPParser(ChunkReader([b"GET / HTTP/1.1\r\n\r\n"]))
    with pytest.raises(RESPProtocolError, match="possible cross protocol scripting attack detected"):
        parser.decode_one()


def test_decode_one_split_buffers():
    parser = RESPParser(ChunkReader([b"$6\r\nfoo", b"bar\r\n"]))
    assert parser.decode_one() == "foobar"


def test_decode_one_empty_message():
    parser = RESPParser(ChunkReader())
    with pytest.raises(EOFError):
        parser.decode_one()


def test_decode_one_high_volume_data():
    large = b"a" * (10 * IO_BUFFER_LENGTH)
    parser = RESPParser(ChunkReader([b"$%d\r\n" % len(large), large, b"\r\n"]))
    assert parser.decode_one() == large.decode()


def test_decode_one_nested_arrays():
    parser = RESPParser(ChunkReader([b"*2\r\n*2\r\n$3\r\nfoo\r\n$3\r\nbar\r\n$3\r\nbaz\r\n"]))
    assert parser.decode_one() == [["foo", "bar"], "baz"]


def test_decode_one_with_small_buffer_reads_across_chunks():
    parser = RESPParser(io.BytesIO(b"*2\r\n$5\r\nhello\r\n:42\r\n"), buffer_size=3)
    assert parser.decode_one() == ["hello", 42]


def test_initial_bytes_are_decoded_first():
    parser = RESPParser(ChunkReader([b"+second\r\n"]), initial=b"+first\r\n")
    assert [parser.decode_one(), parser.decode_one()] == ["first", "second"]


def test_invalid_integer_raises():
    with pytest.raises(RESPProtocolError):
        decode(b":abc\r\n")


def test_integer_out_of_range_raises():
    with pytest.raises(RESPProtocolError):
        decode(b":9223372036854775808\r\n")


def test_negative_bulk_length_raises():
    with pytest.raises(RESPProtocolError):
        decode(b"$-1\r\n")


def test_unterminated_line_raises_eof():
    with pytest.raises(EOFError):
        decode(b"+OK")


def test_bulk_string_cut_short_gives_empty_string():
    parser = RESPParser(ChunkReader([b"$10\r\nabc"]))
    assert parser.decode_one() == ""


def test_encode_simple_and_bulk_string():
    assert encode("OK", True) == b"+OK\r\n"
    assert encode("OK", False) == b"$2\r\nOK\r\n"


def test_encode_string_length_counts_bytes():
    assert encode("é", False) == b"$2\r\n\xc3\xa9\r\n"


def test_encode_int():
    assert encode(-12, False) == b":-12\r\n"


def test_encode_string_list():
    assert encode(["SET", "k", "v"], False) == b"*3\r\n$3\r\nSET\r\n$1\r\nk\r\n$1\r\nv\r\n"


def test_encode_obj_list_uses_values():
    assert encode([Obj(value="a"), Obj(value=7)], False) == b"*2\r\n$1\r\na\r\n:7\r\n"


def test_encode_mixed_nested_list():
    assert encode([1, ["x"]], False) == b"*2\r\n:1\r\n*1\r\n$1\r\nx\r\n"


def test_encode_error():
    assert encode(ValueError("ERR bad"), False) == b"-ERR bad\r\n"


def test_encode_queue_element_and_list():
    element = QueueElement("k", Obj(value=10))
    assert encode(element, False) == b"*2\r\n$1\r\nk\r\n:10\r\n"
    assert encode([element], False) == b"*1\r\n*2\r\n$1\r\nk\r\n:10\r\n"


def test_encode_stack_element_and_list():
    element = StackElement("s", Obj(value="v"))
    assert encode(element, False) == b"*2\r\n$1\r\ns\r\n$1\r\nv\r\n"
    assert encode([element, element], False) == (
        b"*2\r\n*2\r\n$1\r\ns\r\n$1\r\nv\r\n*2\r\n$1\r\ns\r\n$1\r\nv\r\n"
    )


def test_encode_watch_event():
    event = WatchEvent("k", "SET", Obj(value="v"))
    assert encode(event, False) == b"*3\r\n$5\r\nkey:k\r\n$6\r\nop:SET\r\n$1\r\nv\r\n"


def test_encode_result_rows():
    rows = [ResultRow("k1", Obj(value="v1")), ResultRow("k2", Obj(value="v2"))]
    expected = b"*2\r\n*2\r\n$2\r\nk1\r\n$2\r\nv1\r\n*2\r\n$2\r\nk2\r\n$2\r\nv2\r\n"
    assert encode(rows, False) == expected


def test_encode_result_rows_round_trip():
    rows = [ResultRow("k1", Obj(value="v1")), ResultRow("", Obj(value="v2"))]
    assert decode(encode(rows, False)) == [["k1", "v1"], ["", "v2"]]


def test_encode_unsupported_type_is_nil():
    assert encode({"a": 1}, False) == RESP_NIL
    assert encode(None, False) == RESP_NIL
    assert encode(True, False) == RESP_NIL