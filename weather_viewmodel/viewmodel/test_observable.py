import asyncio

import pytest

from weather_viewmodel.viewmodel.observable import EventChannel, MutableObservableField


def test_subscribe_emits_current_value():
    field = MutableObservableField("loading", False)
    seen = []
    field.subscribe(seen.append)
    assert seen == [False]


def test_every_write_is_dispatched_even_if_unchanged():
    field = MutableObservableField("loading", False)
    seen = []
    field.subscribe(seen.append, emit_current=False)
    field.value = True
    field.set(True)
    field.value = False
    assert seen == [True, True, False]
    assert field.value is False


def test_unsubscribe_stops_delivery():
    field = MutableObservableField("city_id", None)
    seen = []
    unsubscribe = field.subscribe(seen.append, emit_current=False)
    field.value = 1
    unsubscribe()
    unsubscribe()
    field.value = 2
    assert seen == [1]


def test_failing_observer_does_not_stop_others():
    field = MutableObservableField("error", None)
    seen = []

    def broken(value):
        raise RuntimeError("observer bug")

    field.subscribe(broken, emit_current=False)
    field.subscribe(seen.append, emit_current=False)
    field.value = "boom"
    assert seen == ["boom"]


def test_event_channel_delivers_each_item_once():
    channel = EventChannel("city_resolved")
    channel.send(1)
    channel.send(2)
    assert len(channel) == 2
    assert channel.poll() == 1
    assert channel.poll() == 2
    assert channel.poll() is None


@pytest.mark.asyncio
async def test_event_channel_receive_waits_for_send():
    channel = EventChannel("city_resolved")
    receiver = asyncio.ensure_future(channel.receive())
    await asyncio.sleep(0)
    assert not receiver.done()

    channel.send(524901)

    assert await receiver == 524901
    assert channel.poll() is None


@pytest.mark.asyncio
async def test_event_channel_receive_returns_queued_item():
    channel = EventChannel("city_resolved")
    channel.send(7)
    assert await channel.receive() == 7


@pytest.mark.asyncio
async def test_event_channel_keeps_item_when_receiver_is_cancelled():
    channel = EventChannel("city_resolved")
    receiver = asyncio.ensure_future(channel.receive())
    await asyncio.sleep(0)

    channel.send(524901)
    receiver.cancel()
    await asyncio.gather(receiver, return_exceptions=True)

    assert receiver.cancelled()
    assert channel.poll() == 524901
    assert channel.poll() is None
