import json

import pytest

from queue_mincer.exceptions import SchemaMismatch, TemplateNotFound
from queue_mincer.loaders import CsvLoader, JsonLoader, MemoryLoader
from queue_mincer.queue import CachedStore, PassthroughStore, QueueManager
from queue_mincer.settings import QueueSettings


def test_queue_manager_memory_scenario():
    loader = MemoryLoader(
        QueueSettings(loader="memory", put=True, item_template={"task": "string"})
    )
    queue = QueueManager(loader)
    queue.initialize()
    assert queue.item_template == {"task": "string"}
    queue.push_back({"task": "a"})
    queue.push_front({"task": "b"})
    assert queue.get_front() == {"task": "b"}
    assert queue.get_front() == {"task": "a"}
    assert queue.get_front() is None
    assert queue.get_back() is None


@pytest.mark.parametrize("mode", ["cached", "passthrough"])
def test_queue_manager_modes(mode):
    loader = MemoryLoader(QueueSettings(loader="memory", put=True))
    queue = QueueManager(loader, mode=mode)
    queue.initialize()
    queue.initialize()
    assert queue.initialized
    store_class = CachedStore if mode == "cached" else PassthroughStore
    assert isinstance(queue.store, store_class)

    x = {"task": "x", "n": 1}
    queue.push_back(x)
    assert queue.get_back() == x
    queue.push_front(x)
    assert queue.get_front() == x

    queue.push_back({"v": 1})
    queue.push_back({"v": 2})
    queue.push_front({"v": 0})
    assert queue.size() == 3
    assert queue.get_back() == {"v": 2}
    assert queue.get_front() == {"v": 0}
    assert queue.get_front() == {"v": 1}
    assert queue.get_front() is None
    assert queue.size() == 0


def test_queue_manager_schema_mismatch():
    loader = MemoryLoader(QueueSettings(loader="memory", put=True))
    queue = QueueManager(
        loader, mode="cached", item_template={"task": "string", "done": "boolean"}
    )
    queue.push_back({"task": "x", "done": False})
    with pytest.raises(SchemaMismatch):
        queue.push_back({"task": "x"})
    with pytest.raises(SchemaMismatch):
        queue.push_front({"task": 1, "done": False})
    assert queue.size() == 1
    assert queue.validate_item({"task": "y", "done": True, "extra": 1})
    assert not queue.validate_item({"done": True})


@pytest.mark.parametrize("mode", ["cached", "passthrough"])
def test_queue_manager_templates(mode, make_settings):
    loader = JsonLoader(make_settings(loader="json", active="queue"))
    queue = QueueManager(loader, mode=mode)
    queue.initialize()
    assert queue.size() == 0

    queue.replace_from_template("chores")
    assert queue.store.items() == loader.load_template("chores")

    queue.add_front_from_template("default")
    queue.add_back_from_template("default")
    tasks = [i["task"] for i in queue.store.items()]
    assert tasks == [
        "write docs",
        "fix bug",
        "release",
        "dishes",
        "laundry",
        "write docs",
        "fix bug",
        "release",
    ]

    with pytest.raises(TemplateNotFound):
        queue.replace_from_template("missing")
    with pytest.raises(TemplateNotFound):
        queue.add_front_from_template("missing")
    with pytest.raises(TemplateNotFound):
        queue.add_back_from_template("missing")
    assert queue.size() == 8


def test_queue_manager_add_front_from_template(tmp_path):
    (tmp_path / "t.json").write_text(json.dumps([{"v": 1}, {"v": 2}]))
    (tmp_path / "queue.json").write_text(json.dumps([{"v": 3}]))
    settings = QueueSettings(loader="json", templates_uri=str(tmp_path), active="queue")
    queue = QueueManager(JsonLoader(settings))
    queue.add_front_from_template("t")
    assert queue.store.items() == [{"v": 1}, {"v": 2}, {"v": 3}]
    assert json.loads((tmp_path / "queue.json").read_text()) == [
        {"v": 1},
        {"v": 2},
        {"v": 3},
    ]
    # the template itself is untouched
    assert json.loads((tmp_path / "t.json").read_text()) == [{"v": 1}, {"v": 2}]


def test_queue_manager_cached_never_writes_back(make_settings, templates_path):
    path = templates_path / "default.json"
    original = path.read_text()
    loader = JsonLoader(make_settings(loader="json", active="default"))
    queue = QueueManager(loader, mode="cached")
    queue.initialize()
    assert queue.get_front()["task"] == "write docs"
    queue.push_back({"task": "new", "done": False, "priority": 9})
    queue.replace_from_template("chores")
    assert queue.get_back()["task"] == "laundry"
    assert path.read_text() == original

    # external changes are not seen anymore
    path.write_text("[]")
    assert queue.size() == 1
    assert queue.get_front()["task"] == "dishes"


def test_queue_manager_passthrough_reads_store(make_settings, templates_path):
    path = templates_path / "default.json"
    loader = JsonLoader(make_settings(loader="json", active="default"))
    queue = QueueManager(loader, mode="passthrough")
    queue.initialize()
    assert queue.get_front()["task"] == "write docs"
    assert len(json.loads(path.read_text())) == 2

    # external changes are visible on the next call
    path.write_text(json.dumps([{"task": "external", "done": False, "priority": 0}]))
    assert queue.get_front()["task"] == "external"
    assert queue.get_front() is None
    assert json.loads(path.read_text()) == []


def test_queue_manager_inferred_template(make_settings):
    # inferred from the active content at initialization
    loader = CsvLoader(make_settings(loader="csv"))
    queue = QueueManager(loader)
    queue.initialize()
    assert queue.item_template == {
        "task": "string",
        "done": "boolean",
        "priority": "number",
        "estimate": "number",
    }
    with pytest.raises(SchemaMismatch):
        queue.push_back({"task": "x"})

    # configured template wins
    loader = JsonLoader(make_settings(loader="json", active="default"))
    queue = QueueManager(loader, item_template={"task": "string"})
    queue.push_back({"task": "x"})
    assert queue.get_back() == {"task": "x"}


def test_queue_manager_template_established_once(tmp_path):
    (tmp_path / "t.json").write_text(json.dumps([{"v": 1}]))
    (tmp_path / "u.json").write_text(json.dumps([{"w": "x"}]))
    settings = QueueSettings(loader="json", templates_uri=str(tmp_path), active="queue")
    queue = QueueManager(JsonLoader(settings))
    queue.initialize()
    # no template yet: anything goes
    assert queue.item_template is None
    queue.push_back({"anything": True})

    # established by the first loaded template, then fixed
    queue.add_back_from_template("t")
    assert queue.item_template == {"v": "number"}
    queue.replace_from_template("u")
    assert queue.item_template == {"v": "number"}
    with pytest.raises(SchemaMismatch):
        queue.push_back({"w": "y"})
    queue.push_back({"v": 2})
    assert queue.store.items() == [{"w": "x"}, {"v": 2}]


def test_queue_manager_memory_templates():
    loader = MemoryLoader(QueueSettings(loader="memory", put=True))
    queue = QueueManager(loader)
    queue.push_back({"v": 1})
    # memory templates always exist and are empty
    queue.replace_from_template("whatever")
    assert queue.size() == 0
