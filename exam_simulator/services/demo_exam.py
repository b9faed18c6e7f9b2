"""
services/demo_exam.py

최초 실행 시 생성되는 데모 시험 (삭제 불가).
문제 유형 4가지를 모두 포함한다.
"""

DEMO_EXAM = {
    "title": "데모 시험",
    "description": "문제 유형별 동작을 확인하기 위한 샘플 시험입니다.",
    "author": "Exam Simulator",
    "code": "DEMO-001",
    "time": 10,
    "pass_score": 70,
    "test": [
        {
            "type": "multiple-choice",
            "question_text": "대한민국의 수도는?",
            "choices": [
                {"text": "부산", "correct": False},
                {"text": "서울", "correct": True},
                {"text": "인천", "correct": False},
                {"text": "대구", "correct": False},
            ],
            "explanation": "대한민국의 수도는 서울이다.",
        },
        {
            "type": "multiple-answer",
            "question_text": "다음 중 소수(prime number)를 모두 고르시오.",
            "choices": [
                {"text": "2", "correct": True},
                {"text": "4", "correct": False},
                {"text": "7", "correct": True},
                {"text": "9", "correct": False},
            ],
            "explanation": "2 와 7 은 1 과 자기 자신으로만 나누어진다.",
        },
        {
            "type": "fill-in",
            "question_text": "프랑스의 수도를 영어로 쓰시오.",
            "choices": [
                {"text": "Paris", "correct": True},
            ],
            "explanation": "대소문자는 구분하지 않는다.",
        },
        {
            "type": "list-order",
            "question_text": "작은 수부터 큰 수 순서로 나열하시오.",
            "choices": [
                {"text": "1", "correct": True},
                {"text": "10", "correct": True},
                {"text": "100", "correct": True},
            ],
            "explanation": "보기에 적힌 순서가 정답 순서이며, 화면에서는 섞어서 보여 준다.",
        },
        {
            "type": "multiple-choice",
            "question_text": "HTTP 상태 코드 404 의 의미는?",
            "choices": [
                {"text": "Not Found", "correct": True},
                {"text": "Forbidden", "correct": False},
                {"text": "Internal Server Error", "correct": False},
            ],
            "explanation": None,
        },
    ],
}
