"""
Tests for FlashcardStore – CRUD, cascade delete, reordering, persistence.
"""

import itertools
import threading
import pytest
from datetime import datetime, timedelta, timezone

from core.models import Card
from core.store import FlashcardStore, move_items
from db.database import create_session_factory, database_url
from db.models import Slot
from db.slots import CARDS_KEY, cards_slot, collections_slot

START = datetime(2026, 1, 1, tzinfo=timezone.utc)


class RecordingSlot:
    """In-memory stand-in for ListSlot that counts writes."""

    def __init__(self, items=None, fail=False):
        self.items = list(items or [])
        self.saves = 0
        self.fail = fail

    def load(self):
        return list(self.items)

    def save(self, items):
        self.saves += 1
        if self.fail:
            return False
        self.items = list(items)
        return True

    def clear(self):
        self.items = []
        return True


def ticking_clock():
    ticks = itertools.count()
    return lambda: START + timedelta(minutes=next(ticks))


@pytest.fixture
def slots():
    return RecordingSlot(), RecordingSlot()


@pytest.fixture
def store(slots):
    return FlashcardStore(*slots, clock=ticking_clock())


@pytest.fixture
def session_factory(tmp_path):
    factory = create_session_factory(database_url(tmp_path / "cardbox.db"))
    yield factory
    factory.kw["bind"].dispose()


def fronts(cards):
    return [c.front for c in cards]


class TestCollections:
    def test_add_trims_and_drops_blank(self, store, slots):
        created = store.add_collections(["  Spanish ", "", "   ", "German\n"])
        assert [c.title for c in created] == ["Spanish", "German"]
        assert [c.title for c in store.collections] == ["Spanish", "German"]
        assert slots[0].saves == 1

    def test_add_preserves_order_and_unique_ids(self, store):
        titles = [f"T{i}" for i in range(20)]
        store.add_collections(titles)
        assert [c.title for c in store.collections] == titles
        assert len({c.id for c in store.collections}) == 20

    def test_add_appends_after_existing(self, store):
        store.add_collections(["A"])
        store.add_collections(["B", "C"])
        assert [c.title for c in store.collections] == ["A", "B", "C"]

    def test_add_stamps_created_at(self, store):
        a, b = store.add_collections(["A", "B"])
        assert a.created_at == START
        assert b.created_at == START + timedelta(minutes=1)

    def test_add_all_blank_is_noop(self, store, slots):
        assert store.add_collections(["", "  "]) == []
        assert store.add_collections([]) == []
        assert store.collections == []
        assert slots[0].saves == 0

    def test_edit_title(self, store):
        (col,) = store.add_collections(["Spansh"])
        store.edit_collection_title(col.id, " Spanish ")
        edited = store.get_collection(col.id)
        assert edited.title == "Spanish"
        assert edited.created_at == col.created_at

    def test_edit_title_unknown_id(self, store, slots):
        store.add_collections(["A"])
        saves = slots[0].saves
        store.edit_collection_title("missing", "B")
        assert [c.title for c in store.collections] == ["A"]
        assert slots[0].saves == saves

    def test_edit_title_blank_is_ignored(self, store):
        (col,) = store.add_collections(["A"])
        store.edit_collection_title(col.id, "   ")
        assert store.get_collection(col.id).title == "A"

    def test_delete_removes_cards(self, store, slots):
        spanish, german = store.add_collections(["Spanish", "German"])
        store.add_cards(spanish.id, [("hola", "hello"), ("sí", "yes")])
        store.add_cards(german.id, [("ja", "yes")])

        store.delete_collection(spanish.id)

        assert store.get_collection(spanish.id) is None
        assert store.cards_in(spanish.id) == []
        assert fronts(store.cards_in(german.id)) == ["ja"]
        assert [c.front for c in slots[1].items] == ["ja"]
        assert [c.title for c in slots[0].items] == ["German"]

    def test_delete_unknown_is_noop(self, store, slots):
        store.add_collections(["A"])
        saves = slots[0].saves, slots[1].saves
        store.delete_collection("missing")
        assert len(store.collections) == 1
        assert (slots[0].saves, slots[1].saves) == saves

    def test_delete_notifies_once(self, store):
        (col,) = store.add_collections(["A"])
        store.add_cards(col.id, [("a", "b")])
        calls = []
        store.subscribe(lambda: calls.append(1))
        store.delete_collection(col.id)
        assert calls == [1]

    def test_card_count(self, store):
        (col,) = store.add_collections(["A"])
        store.add_cards(col.id, [("a", "b"), ("c", "d")])
        assert store.card_count(col.id) == 2
        assert store.card_count("other") == 0


class TestCards:
    def test_spanish_scenario(self, store):
        (col,) = store.add_collections(["Spanish"])
        store.add_cards(col.id, [("hola", "hello"), ("", "world")])
        cards = store.cards_in(col.id)
        assert len(cards) == 1
        assert (cards[0].front, cards[0].back) == ("hola", "hello")

    def test_add_trims_and_filters(self, store):
        (col,) = store.add_collections(["A"])
        created = store.add_cards(col.id, [
            ("  one ", " 1 "), ("two", "   "), ("\t", "3"), ("four", "4"),
        ])
        assert [(c.front, c.back) for c in created] == [("one", "1"), ("four", "4")]
        assert all(c.collection_id == col.id for c in created)

    def test_add_sets_due_at(self, store):
        (col,) = store.add_collections(["A"])  # consumes one tick
        (card,) = store.add_cards(col.id, [("a", "b")])
        assert card.due_at == START + timedelta(minutes=1, hours=24)
        assert card.is_done is False

    def test_add_all_invalid_is_noop(self, store, slots):
        (col,) = store.add_collections(["A"])
        assert store.add_cards(col.id, [("", "x"), ("x", " ")]) == []
        assert store.cards == []
        assert slots[1].saves == 0

    def test_add_to_unknown_collection_is_kept(self, store):
        store.add_cards("nowhere", [("a", "b")])
        assert fronts(store.cards_in("nowhere")) == ["a"]

    def test_cards_in_is_a_snapshot(self, store):
        (col,) = store.add_collections(["A"])
        store.add_cards(col.id, [("a", "b")])
        snapshot = store.cards_in(col.id)
        snapshot.clear()
        assert len(store.cards_in(col.id)) == 1

    def test_edit_card(self, store):
        (col,) = store.add_collections(["A"])
        (card,) = store.add_cards(col.id, [("a", "b")])
        store.edit_card(card.id, " front ", "back ")
        edited = store.get_card(card.id)
        assert (edited.front, edited.back) == ("front", "back")
        assert edited.due_at == card.due_at

    def test_edit_card_blank_is_ignored(self, store):
        (col,) = store.add_collections(["A"])
        (card,) = store.add_cards(col.id, [("a", "b")])
        store.edit_card(card.id, "", "new")
        assert store.get_card(card.id) == card

    def test_edit_unknown_card_leaves_storage_untouched(self, session_factory):
        store = FlashcardStore(collections_slot(session_factory), cards_slot(session_factory))
        (col,) = store.add_collections(["A"])
        store.add_cards(col.id, [("a", "b"), ("c", "d")])

        s = session_factory()
        before = s.get(Slot, CARDS_KEY).payload
        s.close()
        cards_before = store.cards

        store.edit_card("missing", "x", "y")

        s = session_factory()
        after = s.get(Slot, CARDS_KEY).payload
        s.close()
        assert after == before
        assert store.cards == cards_before

    def test_delete_card(self, store):
        (col,) = store.add_collections(["A"])
        a, b = store.add_cards(col.id, [("a", "1"), ("b", "2")])
        store.delete_card(a.id)
        assert store.cards_in(col.id) == [b]
        store.delete_card("missing")
        assert store.cards_in(col.id) == [b]

    def test_toggle_done(self, store):
        (col,) = store.add_collections(["A"])
        (card,) = store.add_cards(col.id, [("a", "b")])
        store.toggle_card_done(card.id)
        assert store.get_card(card.id).is_done is True
        store.toggle_card_done(card.id)
        assert store.get_card(card.id).is_done is False

    def test_defer(self, store):
        (col,) = store.add_collections(["A"])
        (card,) = store.add_cards(col.id, [("a", "b")])
        store.defer_card(card.id)
        assert store.get_card(card.id).due_at == card.due_at + timedelta(hours=24)


class TestMoveCards:
    @pytest.fixture
    def interleaved(self, store):
        c1, c2 = store.add_collections(["One", "Two"])
        for front in "ABCD":
            store.add_cards(c1.id, [(front, "x")])
            store.add_cards(c2.id, [(front.lower(), "y")])
        return c1, c2

    def test_move_first_to_end(self, store, interleaved):
        c1, c2 = interleaved
        store.move_cards(c1.id, {0}, 3)
        assert fronts(store.cards_in(c1.id)) == ["B", "C", "D", "A"]
        assert fronts(store.cards_in(c2.id)) == ["a", "b", "c", "d"]

    def test_other_collection_keeps_global_slots(self, store, interleaved):
        c1, _ = interleaved
        before = [(i, c.front) for i, c in enumerate(store.cards) if c.collection_id != c1.id]
        store.move_cards(c1.id, {3}, 0)
        after = [(i, c.front) for i, c in enumerate(store.cards) if c.collection_id != c1.id]
        assert after == before
        assert fronts(store.cards) == ["D", "a", "A", "b", "B", "c", "C", "d"]

    def test_move_several(self, store, interleaved):
        c1, _ = interleaved
        store.move_cards(c1.id, {0, 2}, 2)
        assert fronts(store.cards_in(c1.id)) == ["B", "D", "A", "C"]

    def test_move_one_step(self, store, interleaved):
        c1, _ = interleaved
        store.move_cards(c1.id, {1}, 2)
        assert fronts(store.cards_in(c1.id)) == ["A", "C", "B", "D"]

    @pytest.mark.parametrize("source,destination", [
        ({4}, 0), ({-1}, 0), ({0}, 5), ({0}, -1), (set(), 1),
    ])
    def test_out_of_range_is_noop(self, store, slots, interleaved, source, destination):
        c1, _ = interleaved
        before = store.cards
        saves = slots[1].saves
        store.move_cards(c1.id, source, destination)
        assert store.cards == before
        assert slots[1].saves == saves

    def test_unknown_collection_is_noop(self, store, interleaved):
        before = store.cards
        store.move_cards("missing", {0}, 1)
        assert store.cards == before


class TestMoveItems:
    def test_destination_past_remaining_clamps(self):
        assert move_items(["A", "B", "C", "D"], [0, 1], 4) == ["C", "D", "A", "B"]

    def test_to_front(self):
        assert move_items(["A", "B", "C"], [2], 0) == ["C", "A", "B"]

    def test_same_place(self):
        assert move_items(["A", "B", "C"], [1], 1) == ["A", "B", "C"]

    def test_invalid(self):
        assert move_items([], [0], 0) is None
        assert move_items(["A"], [1], 0) is None


class TestPersistence:
    def test_reload_from_storage(self, session_factory):
        store = FlashcardStore(collections_slot(session_factory), cards_slot(session_factory))
        (col,) = store.add_collections(["Spanish"])
        store.add_cards(col.id, [("hola", "hello"), ("adiós", "bye")])
        store.move_cards(col.id, {1}, 0)

        reloaded = FlashcardStore(collections_slot(session_factory), cards_slot(session_factory))
        assert reloaded.collections == store.collections
        assert fronts(reloaded.cards_in(col.id)) == ["adiós", "hola"]

    def test_empty_storage(self, session_factory):
        store = FlashcardStore(collections_slot(session_factory), cards_slot(session_factory))
        assert store.collections == []
        assert store.cards == []

    def test_write_failures_are_swallowed(self):
        store = FlashcardStore(RecordingSlot(fail=True), RecordingSlot(fail=True))
        (col,) = store.add_collections(["A"])
        store.add_cards(col.id, [("a", "b")])
        assert fronts(store.cards_in(col.id)) == ["a"]

    def test_rejected_payload_does_not_escape(self, session_factory):
        store = FlashcardStore(collections_slot(session_factory), cards_slot(session_factory))
        calls = []
        store.subscribe(lambda: calls.append(1))

        (col,) = store.add_collections(["bad\ud800"])
        store.add_cards(col.id, [("front\udfff", "back")])

        assert [c.title for c in store.collections] == ["bad\ud800"]
        assert fronts(store.cards_in(col.id)) == ["front\udfff"]
        assert calls == [1, 1]
        assert collections_slot(session_factory).load() == []
        assert cards_slot(session_factory).load() == []

    def test_overflowing_timestamp_loads_empty_store(self, session_factory):
        s = session_factory()
        s.merge(Slot(key="saved_collections_v1",
                     payload='[{"id": "x", "title": "t", "createdAt": 1e400}]'))
        s.commit()
        s.close()

        store = FlashcardStore(collections_slot(session_factory), cards_slot(session_factory))
        assert store.collections == []
        store.add_collections(["Fresh"])
        assert [c.title for c in store.collections] == ["Fresh"]

    def test_reset(self, store, slots):
        (col,) = store.add_collections(["A"])
        store.add_cards(col.id, [("a", "b")])
        store.reset()
        assert store.collections == []
        assert store.cards == []
        assert slots[0].items == [] and slots[1].items == []


class TestSubscriptions:
    def test_notified_per_mutation(self, store):
        calls = []
        store.subscribe(lambda: calls.append(len(store.collections)))
        store.add_collections(["A"])
        store.add_collections([""])
        store.add_collections(["B"])
        assert calls == [1, 2]

    def test_unsubscribe(self, store):
        calls = []
        unsubscribe = store.subscribe(lambda: calls.append(1))
        unsubscribe()
        store.add_collections(["A"])
        assert calls == []

    def test_failing_listener_does_not_block_others(self, store):
        calls = []

        def boom():
            raise RuntimeError("listener bug")

        store.subscribe(boom)
        store.subscribe(lambda: calls.append(1))
        store.add_collections(["A"])
        assert calls == [1]
        assert len(store.collections) == 1


class TestThreads:
    def test_concurrent_adds(self, store):
        (col,) = store.add_collections(["A"])

        def worker(n):
            for i in range(50):
                store.add_cards(col.id, [(f"{n}-{i}", "x")])

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        cards = store.cards_in(col.id)
        assert len(cards) == 200
        assert len({c.id for c in cards}) == 200
        assert all(isinstance(c, Card) for c in cards)
