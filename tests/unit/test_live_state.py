import pytest

from emporium.live.hub import LiveQueryHub
from emporium.live.state import LiveCollection


def test_fold_create_update_delete_close():
    items = LiveCollection()
    items.apply("CREATE", {"id": "Message:1", "content": "hi"})
    items.apply("CREATE", {"id": "Message:2", "content": "there"})
    items.apply("CREATE", {"id": "Message:1", "content": "hi again"})
    assert items.ids() == ["Message:1", "Message:2"]
    assert items.items[0]["content"] == "hi again"

    items.apply("UPDATE", {"id": "Message:2", "content": "edited"})
    items.apply("UPDATE", {"id": "Message:3", "content": "late"})
    assert items.items[1] == {"id": "Message:2", "content": "edited"}
    assert items.ids()[-1] == "Message:3"

    items.apply("DELETE", {"id": "Message:1"})
    items.apply("DELETE", {"id": "Message:404"})
    assert items.ids() == ["Message:2", "Message:3"]

    items.apply("CLOSE")
    assert items.closed is True


def test_update_merges_fields():
    items = LiveCollection([{"id": "Chat:1", "status": "open", "admin_id": None}])
    items.apply("UPDATE", {"id": "Chat:1", "status": "active"})
    assert items.items == [{"id": "Chat:1", "status": "active", "admin_id": None}]


def test_sort_key_keeps_messages_in_order():
    items = LiveCollection(
        [{"id": "m2", "created_at": "2026-01-01T10:00:02"}, {"id": "m1", "created_at": "2026-01-01T10:00:01"}],
        sort_key="created_at",
    )
    assert items.ids() == ["m1", "m2"]
    items.apply("CREATE", {"id": "m0", "created_at": "2026-01-01T10:00:00"})
    assert items.ids() == ["m0", "m1", "m2"]


def test_unknown_action_rejected():
    with pytest.raises(ValueError):
        LiveCollection().apply("EXPLODE", {"id": "x"})


def test_attach_to_hub():
    hub = LiveQueryHub()
    qid = hub.live("Chat")
    items = LiveCollection()
    items.attach(hub, qid)
    hub.publish("CREATE", "Chat", {"id": "Chat:1", "status": "open"})
    hub.publish("UPDATE", "Chat", {"id": "Chat:1", "status": "closed"})
    hub.kill(qid)
    assert items.items == [{"id": "Chat:1", "status": "closed"}]
    assert items.closed
