"""
Tests for toast notifications
"""
from interview_console.core.toasts import ToastKind, ToastQueue


def test_newest_first_and_capped():
    queue = ToastQueue(limit=2, clock=lambda: 0.0)
    for message in ("one", "two", "three"):
        queue.add(message)
    assert [toast["message"] for toast in queue.as_list()] == ["three", "two"]


def test_toasts_expire():
    now = [0.0]
    queue = ToastQueue(auto_close_ms=1000, clock=lambda: now[0])
    queue.add("Saved", ToastKind.SUCCESS)
    now[0] = 0.5
    assert len(queue.active()) == 1
    now[0] = 1.0
    assert queue.active() == []


def test_dismiss():
    queue = ToastQueue(clock=lambda: 0.0)
    toast = queue.add("Oops", "error")
    assert toast.kind == ToastKind.ERROR
    queue.dismiss(toast.id)
    assert queue.as_list() == []
