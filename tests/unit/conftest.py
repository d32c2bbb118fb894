"""Unit test configuration - in-memory collaborators for isolated testing"""

from typing import List

import pymupdf
import pytest

from policy_rag.generation import BaseGenerator
from policy_rag.models import ChatMessage, Section
from policy_rag.store import InMemoryPolicyStore


SAMPLE_POLICY_TEXT = """상해보험 보통약관
버전: 2.3
시행일자: 2024-01-15
제1장 총칙
제1조(목적)
이 약관은 상해로 인한 손해를 보장합니다.
제2조(용어의 정의)
피보험자란 보험사고의 대상이 되는 사람을 말합니다.
제2장 보험금의 지급
제3조(보험금의 지급사유)
회사는 피보험자가 상해를 입은 경우 보험금을 지급합니다.
제4조(보험금을 지급하지 않는 사유)
고의로 사고를 일으킨 경우 보험금을 지급하지 않습니다.
제5조(보험금 청구 절차)
청구는 보험금 청구서와 사고증명서를 제출하는 절차로 진행합니다.
"""


class FakeGenerator(BaseGenerator):
    """Records calls and returns a canned answer"""

    def __init__(self, answer: str = "답변입니다."):
        self.answer = answer
        self.calls: List[tuple] = []

    async def generate(self, system_prompt: str, messages: List[ChatMessage]) -> str:
        self.calls.append((system_prompt, list(messages)))
        return self.answer

    def get_model_info(self) -> dict:
        return {"name": "fake", "type": "fake", "parameters": {}}


@pytest.fixture
def sample_policy_text():
    return SAMPLE_POLICY_TEXT


@pytest.fixture
def memory_store():
    return InMemoryPolicyStore()


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def make_section():
    """Factory for hand-built sections"""
    def _make(title="섹션", content=None, order=0, keywords=None):
        return Section(
            title=title,
            content=content if content is not None else title + "\n",
            order=order,
            keywords=list(keywords or []),
        )
    return _make


# Text-layer policy with bold chapter headings, one PDF text line per entry
POLICY_PDF_LINES = [
    ("Chapter 1 General", True),
    ("Version 3.0 of the accident insurance policy.", False),
    ("The insurer pays the claim amount stated in this policy.", False),
    ("Chapter 2 Claims", True),
    ("A claim is filed with the claim form and the accident report.", False),
    ("Chapter 3 Exclusions", True),
    ("No payment is made for intentional acts.", False),
]


@pytest.fixture
def make_pdf():
    """Factory for single-page PDFs built from (text, is_heading) lines"""
    def _make(lines=POLICY_PDF_LINES):
        doc = pymupdf.open()
        page = doc.new_page()
        y = 72
        for text, is_heading in lines:
            if is_heading:
                page.insert_text((72, y), text, fontsize=20, fontname="hebo")
            else:
                page.insert_text((72, y), text, fontsize=11)
            y += 28
        data = doc.tobytes()
        doc.close()
        return data
    return _make
