"""
System prompt for the insurance chat assistant.

Ranked policy sections are embedded as citable context blocks:

    [<section title>]
    <section content>
    관련 키워드: <matched keywords>
"""

from typing import List, Sequence

from ..models import QueryMatch

NO_CONTEXT_NOTICE = "관련 약관 내용이 없습니다."

CONSULTATION_NOTICE = (
    "고객님의 상황에 맞는 상담을 원하시면 [상담 신청](/inquiry) 또는 "
    "[전화 문의](/contact)를 남겨주세요. 빠르게 답변드리겠습니다."
)

SYSTEM_PROMPT_TEMPLATE = """당신은 보험 전문 상담가입니다. 아래 지침에 따라 답변하세요.

1. 약관 기반 답변:
{context_block}

2. 일반 보험 상식:
- 약관에 없는 내용이라도 일반적인 보험 개념은 설명할 수 있습니다.
- 보험 용어는 쉽게 풀어서 설명하세요.
- 특정 보험사나 상품명은 언급하지 마세요.

3. 전문가 상담 안내:
- 개인 상황에 대한 상담이 필요하면 다음 문구만 사용하세요:
  "{consultation_notice}"

4. 제한 사항:
- 보험 사기나 불법 행위에 관한 질문에는 답하지 마세요.
- 답변은 한국어로 작성하세요.

5. 답변 형식:
- 약관 인용 시 "[섹션명] 내용..." 형식으로 출처를 표시하세요.
- 일반 상식 답변은 "일반적으로..." 또는 "보험 업계에서는..."으로 시작하세요."""


def format_context(matches: Sequence[QueryMatch]) -> str:
    """Render ranked sections as citable context blocks"""
    blocks: List[str] = []
    for match in matches:
        section = match.section
        blocks.append(
            f"[{section.title}]\n"
            f"{section.content.rstrip()}\n"
            f"관련 키워드: {', '.join(match.matched_keywords)}"
        )
    return "\n\n".join(blocks)


def build_system_prompt(matches: Sequence[QueryMatch]) -> str:
    """
    Build the system prompt for the generator.

    Args:
        matches: Context sections (already cut to the number to forward)

    Returns:
        Prompt text; states that no policy context exists when matches is empty
    """
    if matches:
        context_block = (
            "다음 보험약관 내용을 우선적으로 참고하고 출처를 명시하세요.\n\n"
            + format_context(matches)
        )
    else:
        context_block = NO_CONTEXT_NOTICE

    return SYSTEM_PROMPT_TEMPLATE.format(
        context_block=context_block,
        consultation_notice=CONSULTATION_NOTICE,
    )
