from stepauth.auth import proof_of_work


def test_empty_string_golden_value():
    # SHA-512("") = cf83e135...; 0xcf has its top bit set
    assert proof_of_work.hash("").hex().startswith("cf83e1357eefb8bd")
    assert proof_of_work.difficulty("") == 0


def test_leading_zero_bits():
    assert proof_of_work.leading_zero_bits(bytes([0x80, 0x00])) == 0
    assert proof_of_work.leading_zero_bits(bytes([0x01, 0xff])) == 7
    assert proof_of_work.leading_zero_bits(bytes([0x00, 0x00, 0x0f])) == 20
    assert proof_of_work.leading_zero_bits(bytes([0x00, 0x40])) == 9
    assert proof_of_work.leading_zero_bits(bytes(64)) == 512


def test_check_zero_is_always_true():
    for data in ["", "a", "hello world", "x" * 1000]:
        assert proof_of_work.check(data, 0)


def test_check_agrees_with_difficulty():
    for i in range(300):
        data = f"candidate-{i}"
        d = proof_of_work.difficulty(data)
        assert proof_of_work.check(data, d)
        assert not proof_of_work.check(data, d + 1)


def test_check_beyond_digest_length():
    assert not proof_of_work.check("abc", 513)


def test_estimates():
    assert proof_of_work.estimate_work(0) == 1
    assert proof_of_work.estimate_work(10) == 1024
    assert proof_of_work.estimate_seconds(10, hashing_speed=1024) == 1.0


def test_lone_surrogate_still_has_a_difficulty():
    assert proof_of_work.difficulty("\udfff") == proof_of_work.leading_zero_bits(proof_of_work.hash("\udfff"))
    assert proof_of_work.check("\ud800", 0)
