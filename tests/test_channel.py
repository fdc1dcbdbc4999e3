from concurrent.futures import ThreadPoolExecutor

import pytest

from intcode_sim.core.channel import Channel, ChannelClosed, ChannelFull, ChannelTimeout


def test_rendezvous_send_without_receiver_times_out():
    ch = Channel()
    with pytest.raises(ChannelTimeout):
        ch.send(1, timeout=0.05)
    # the value was withdrawn
    assert len(ch) == 0
    with pytest.raises(ChannelTimeout):
        ch.recv(timeout=0.01)


def test_rendezvous_hand_off():
    ch = Channel()
    with ThreadPoolExecutor(max_workers=1) as pool:
        fut = pool.submit(ch.recv, 2.0)
        ch.send(7, timeout=2.0)
        assert fut.result(timeout=2.0) == 7


def test_buffered_send_does_not_block_until_full():
    ch = Channel(2)
    ch.send(1, timeout=0.01)
    ch.send(2, timeout=0.01)
    with pytest.raises(ChannelTimeout):
        ch.send(3, timeout=0.05)
    assert [ch.recv(timeout=0.01), ch.recv(timeout=0.01)] == [1, 2]


def test_try_send():
    ch = Channel(1)
    ch.try_send(5)
    with pytest.raises(ChannelFull):
        ch.try_send(6)
    assert ch.recv(timeout=0.01) == 5
    with pytest.raises(ChannelFull):
        Channel(0).try_send(1)


def test_close_drains_then_disconnects():
    ch = Channel(3)
    ch.send(1)
    ch.send(2)
    ch.close()
    assert ch.closed
    with pytest.raises(ChannelClosed):
        ch.send(3)
    assert ch.recv() == 1
    assert ch.recv() == 2
    with pytest.raises(ChannelClosed):
        ch.recv()


def test_close_wakes_blocked_receiver_and_sender():
    rx = Channel()
    tx = Channel()
    with ThreadPoolExecutor(max_workers=2) as pool:
        receiving = pool.submit(rx.recv)
        sending = pool.submit(tx.send, 1)
        rx.close()
        tx.close()
        with pytest.raises(ChannelClosed):
            receiving.result(timeout=2.0)
        with pytest.raises(ChannelClosed):
            sending.result(timeout=2.0)


def test_iteration_preserves_order():
    ch = Channel()

    def produce():
        for i in range(10):
            ch.send(i, timeout=2.0)
        ch.close()

    with ThreadPoolExecutor(max_workers=1) as pool:
        producer = pool.submit(produce)
        assert list(ch) == list(range(10))
    producer.result()


def test_timeout_is_a_timeout_error():
    with pytest.raises(TimeoutError):
        Channel().recv(timeout=0.01)


def test_negative_capacity():
    with pytest.raises(ValueError):
        Channel(-1)
