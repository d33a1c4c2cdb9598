"""Tests for the waste knowledge base."""

import json

from wastesort.constants import USER_DATABASE_KEY
from wastesort.data import WASTE_DATABASE
from wastesort.knowledge import KnowledgeBase
from wastesort.models import WasteCategory, WasteRecord
from wastesort.storage import MemoryStore


def _record(name, category=WasteCategory.SMESNY):
    return WasteRecord(name=name, category=category)


class TestBuiltinDatabase:
    def test_names_are_unique(self):
        names = [r.name.lower() for r in WASTE_DATABASE]
        assert len(names) == len(set(names))

    def test_contains_common_items(self):
        names = {r.name for r in WASTE_DATABASE}
        assert {"PET láhev", "plechovka", "sklenice", "baterie"} <= names


class TestKnowledgeBase:
    def test_records_start_with_builtin(self, store):
        kb = KnowledgeBase(store)
        assert kb.records()[: len(WASTE_DATABASE)] == list(WASTE_DATABASE)
        assert kb.user_records() == []

    def test_add_prepends_user_record(self, store):
        kb = KnowledgeBase(store, builtin=[])
        assert kb.add(_record("Zubní kartáček"))
        assert kb.add(_record("Žvýkačka"))
        assert [r.name for r in kb.user_records()] == [
            "Žvýkačka",
            "Zubní kartáček",
        ]

    def test_user_records_after_builtin(self, store):
        builtin = [_record("sklenice", WasteCategory.SKLO)]
        kb = KnowledgeBase(store, builtin=builtin)
        kb.add(_record("Zubní kartáček"))
        assert [r.name for r in kb.records()] == ["sklenice", "Zubní kartáček"]

    def test_duplicate_names_rejected(self, store):
        kb = KnowledgeBase(store, builtin=[_record("PET láhev")])
        assert not kb.add(_record("pet LÁHEV"))
        assert kb.add(_record("Zubní kartáček"))
        assert not kb.add(_record("zubní kartáček"))
        assert len(kb.user_records()) == 1

    def test_contains(self, store):
        kb = KnowledgeBase(store, builtin=[_record("Sklenice")])
        assert kb.contains("sklenice")
        assert not kb.contains("baterie")

    def test_is_user_record(self, store):
        kb = KnowledgeBase(store, builtin=[_record("sklenice")])
        kb.add(_record("Zubní kartáček"))
        assert kb.is_user_record("Zubní kartáček")
        assert not kb.is_user_record("sklenice")

    def test_persisted(self, store):
        KnowledgeBase(store).add(_record("Zubní kartáček"))
        assert [r.name for r in KnowledgeBase(store).user_records()] == [
            "Zubní kartáček"
        ]
        saved = json.loads(store.data[USER_DATABASE_KEY])
        assert saved[0]["name"] == "Zubní kartáček"

    def test_corrupt_slot(self):
        store = MemoryStore({USER_DATABASE_KEY: "nope"})
        kb = KnowledgeBase(store)
        assert kb.user_records() == []
        assert len(kb.records()) == len(WASTE_DATABASE)
