"""Tests for rulecheck.messages module."""

import json

from rulecheck.messages import MessageBag


def test_add_deduplicates_per_key():
    """Test the same message is only stored once per key."""
    bag = MessageBag()
    bag.add("name", "Required.").add("name", "Required.").add("email", "Required.")

    assert bag.get("name") == ["Required."]
    assert bag.get("email") == ["Required."]
    assert bag.count() == 2
    assert len(bag) == 2


def test_insertion_order():
    """Test keys and messages keep insertion order."""
    bag = MessageBag()
    bag.add("b", "first").add("a", "second").add("b", "third")

    assert bag.keys() == ["b", "a"]
    assert bag.all() == ["first", "third", "second"]


def test_has_and_first():
    """Test existence checks and first lookups."""
    bag = MessageBag({"name": ["Too short.", "Invalid."]})

    assert bag.has("name")
    assert bag.has()
    assert not bag.has("email")
    assert bag.first("name") == "Too short."
    assert bag.first("email") == ""
    assert bag.first() == "Too short."


def test_format_per_call_and_default():
    """Test output templates with :message and :key."""
    bag = MessageBag({"name": "Required."})

    assert bag.first("name", ":key - :message") == "name - Required."
    assert bag.all("<p>:message</p>") == ["<p>Required.</p>"]

    bag.set_format("[:key] :message")
    assert bag.get("name") == ["[name] Required."]


def test_merge_bag_and_mapping():
    """Test merging appends per key."""
    bag = MessageBag({"name": "Required."})
    bag.merge({"name": ["Too short."], "email": "Invalid."})
    bag.merge(MessageBag({"email": "Taken."}))

    assert bag.get("name") == ["Required.", "Too short."]
    assert bag.get("email") == ["Invalid.", "Taken."]


def test_empty_bag():
    """Test an empty bag reports no messages."""
    bag = MessageBag()

    assert bag.is_empty()
    assert not bag.any()
    assert bag.first() == ""
    assert bag.all() == []
    assert "name" not in bag


def test_contains_and_iter():
    """Test membership by key and iteration over messages."""
    bag = MessageBag({"name": "Required."})

    assert "name" in bag
    assert list(bag) == ["Required."]


def test_to_json():
    """Test JSON export of the raw messages."""
    bag = MessageBag({"name": ["Required."], "nombre": "Obligatorio ñ"})
    data = json.loads(bag.to_json())

    assert data == {"name": ["Required."], "nombre": ["Obligatorio ñ"]}
    assert json.loads(str(bag)) == data
    assert bag.to_dict() is not bag.get_messages()
