import pytest

from conftest import CbcOracle, HashEcbOracle, RandomIvOracle
from ecbattack.detect import (check_deterministic, detect_ecb, find_block_size,
                              find_chosen_offset, find_secret_length)
from ecbattack.errors import DetectionFailure
from ecbattack.oracle import EcbOracle


@pytest.mark.parametrize("block_size", range(8, 33))
def test_block_size_of_stub_oracle(block_size):
    oracle = HashEcbOracle(b"some secret", block_size=block_size)
    assert find_block_size(oracle) == block_size


def test_block_size_of_real_ciphers():
    assert find_block_size(EcbOracle(bytes(16), b"HELLO")) == 16
    assert find_block_size(EcbOracle(bytes(8), b"HELLO", cipher="des")) == 8


def test_block_size_without_length_change_fails():
    with pytest.raises(DetectionFailure):
        find_block_size(lambda data: bytes(16), max_block_size=8)


def test_block_size_shrinking_ciphertext_fails():
    with pytest.raises(DetectionFailure):
        find_block_size(lambda data: bytes(64 - len(data)))


@pytest.mark.parametrize("secret_length", [0, 1, 5, 15, 16, 17, 31, 32, 33, 64])
def test_secret_length(secret_length):
    oracle = EcbOracle(bytes(16), b"s" * secret_length)
    assert find_secret_length(oracle, 16) == secret_length


@pytest.mark.parametrize("secret_length", [0, 7, 8, 9, 24])
def test_secret_length_small_blocks(secret_length):
    oracle = HashEcbOracle(b"\xff" * secret_length, block_size=8)
    assert find_secret_length(oracle, 8) == secret_length


def test_secret_length_without_jump_fails():
    with pytest.raises(DetectionFailure):
        find_secret_length(lambda data: bytes(32), 16)


def test_detect_ecb():
    assert detect_ecb(EcbOracle(bytes(16), b"HELLO"), 16)
    assert detect_ecb(EcbOracle(bytes(16), b"HELLO", prefix=b"xyz"), 16)
    assert not detect_ecb(CbcOracle(b"HELLO"), 16)


def test_check_deterministic():
    check_deterministic(EcbOracle(bytes(16), b"HELLO"))
    with pytest.raises(DetectionFailure):
        check_deterministic(RandomIvOracle(b"HELLO"))


@pytest.mark.parametrize("prefix_length", range(0, 41))
def test_chosen_offset(prefix_length):
    oracle = EcbOracle(bytes(16), b"HELLO WORLD", prefix=b"p" * prefix_length)
    assert find_chosen_offset(oracle, 16) == prefix_length
    assert find_secret_length(oracle, 16, prefix_length) == len(b"HELLO WORLD")


@pytest.mark.parametrize("prefix_length", [0, 3, 8, 13])
def test_chosen_offset_small_blocks(prefix_length):
    oracle = HashEcbOracle(b"secret", block_size=8, prefix=b"O" * prefix_length)
    assert find_chosen_offset(oracle, 8) == prefix_length


def test_chosen_offset_cbc_fails():
    with pytest.raises(DetectionFailure):
        find_chosen_offset(CbcOracle(b"HELLO"), 16)
