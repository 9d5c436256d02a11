import copy
import itertools
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from burnout.auth import create_access_token
from burnout.main import app, get_assessment_repo


class InMemoryAssessmentRepo:
    """Same async interface as AssessmentRepo, backed by a list"""

    def __init__(self) -> None:
        self.docs: List[Dict[str, Any]] = []
        self._seq = itertools.count()

    def _newest_first(self, user_id: str) -> List[Dict[str, Any]]:
        owned = [d for d in self.docs if d["user_id"] == user_id]
        return sorted(owned, key=lambda d: (d["timestamp"], d["_seq"]), reverse=True)

    @staticmethod
    def _public(doc: Dict[str, Any]) -> Dict[str, Any]:
        return {k: copy.deepcopy(v) for k, v in doc.items() if k != "_seq"}

    async def save(self, record: Dict[str, Any]) -> Dict[str, Any]:
        self.docs.append({**copy.deepcopy(record), "_seq": next(self._seq)})
        return copy.deepcopy(record)

    async def latest(self, user_id: str) -> Optional[Dict[str, Any]]:
        docs = self._newest_first(user_id)
        return self._public(docs[0]) if docs else None

    async def history(self, user_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        return [self._public(d) for d in self._newest_first(user_id)[:limit]]

    async def trend(self, user_id: str) -> List[Dict[str, Any]]:
        return [
            {"total_bat_score": d["total_bat_score"], "timestamp": d["timestamp"], "risk_level": d["risk_level"]}
            for d in reversed(self._newest_first(user_id))
        ]

    async def get(self, user_id: str, assessment_id: str) -> Optional[Dict[str, Any]]:
        for d in self.docs:
            if d["user_id"] == user_id and d["id"] == assessment_id:
                return self._public(d)
        return None


@pytest.fixture
def repo():
    return InMemoryAssessmentRepo()


@pytest.fixture
def client(repo):
    app.dependency_overrides[get_assessment_repo] = lambda: repo
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user_id: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


@pytest.fixture
def alice():
    return auth_headers("alice")


@pytest.fixture
def bob():
    return auth_headers("bob")
