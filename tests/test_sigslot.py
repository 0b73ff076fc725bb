import pytest

from zcommon.sigslot import Signal, connect


class Receiver:
    def __init__(self):
        self.got = []

    def on_value(self, value):
        self.got.append(value)

    def on_nothing(self):
        self.got.append("ping")


class Sender:
    def __init__(self):
        self.changed = Signal()
        self.plain = 5


def test_emit_calls_bound_methods_in_order():
    calls = []
    sig = Signal()
    sig.bind(lambda v: calls.append(("a", v)))
    sig.bind(lambda v: calls.append(("b", v)))
    sig(4)
    assert calls == [("a", 4), ("b", 4)]
    assert len(sig) == 2


def test_no_argument_signal():
    r = Receiver()
    sig = Signal()
    sig.bind(r.on_nothing)
    sig()
    sig()
    assert r.got == ["ping", "ping"]


def test_connect_helper():
    s, r = Sender(), Receiver()
    connect(s, "changed", r.on_value)
    s.changed("x")
    assert r.got == ["x"]


def test_connect_non_signal_raises():
    with pytest.raises(TypeError):
        connect(Sender(), "plain", Receiver().on_value)


def test_bind_non_callable_raises():
    sig = Signal()
    with pytest.raises(TypeError):
        sig.bind(3)
    assert len(sig) == 0