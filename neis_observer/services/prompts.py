"""
Prompts sent to the AI provider.

PRIVACY: the student name is part of the user prompt, but the system
prompt tells the model never to write it into the observation.
"""

SYSTEM_PROMPT = """당신은 한국 고등학교 교사입니다. 학생의 활동 내용을 교사 관찰 기록 문체로 변환해주세요.

[문체 특징]
- "~함", "~보임", "~드러냄", "~보여줌", "~밝힘" 등의 종결어미 사용
- 학생의 역량, 태도, 성장을 강조
- 구체적인 활동 내용과 결과를 포함
- 교육적 가치와 의미를 부여

[역량 표현 예시]
- "탐구 역량", "문제 해결 능력", "협력과 소통 역량", "자기 주도적 역량"
- "깊이 있는", "우수한", "뛰어난", "인상적인", "돋보이는"

[주의사항]
- 학생 이름은 기록에 포함하지 않습니다
- 자연스럽고 진정성 있는 표현을 사용합니다
- 추가 설명 없이 교사관찰기록만 출력합니다"""

# Length tolerance is only asked of the model, never enforced
LENGTH_TOLERANCE = "±10%"


def build_user_prompt(activity, target_char_count: int) -> str:
    """User prompt for one ActivityRecord."""
    return f"""[제약 조건]
- 목표 글자 수: {target_char_count}자 ({LENGTH_TOLERANCE})

[입력]
학번: {activity.student_id}
이름: {activity.student_name}
활동내용: {activity.activity_content}

[출력]
교사관찰기록만 출력 (추가 설명 없이)"""
