"""
Answer checking and mock test scoring
"""
import re

from utils.errors import InvalidInput

MARKS_CORRECT = 4
MARKS_WRONG = -1

# Leading decimal number, the way a browser's parseFloat reads "4.5 m/s"
_LEADING_NUMBER = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')


def parse_numeric(value):
    """Parse the leading number of value; None when there is none."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = _LEADING_NUMBER.match(str(value).strip())
    if not match:
        return None
    return float(match.group(0))


def canonical_number(value):
    """
    Canonical string for a numeric answer so that "4.50", "4.5" and 4.5
    compare equal, and "4.0" equals "4".
    """
    number = parse_numeric(value)
    if number is None:
        return None
    if number.is_integer():
        return str(int(number))
    return repr(number)


def is_blank(answer):
    return answer is None or (isinstance(answer, str) and answer.strip() == '')


def check_answer(question, answer):
    """
    True when answer matches the question's key.

    MCQ labels compare case-insensitively. Numerical answers compare by
    canonical value; an unparsable numerical answer raises InvalidInput.
    """
    if question.is_mcq:
        return str(answer).strip().upper() == str(question.correct_answer).strip().upper()

    submitted = canonical_number(answer)
    if submitted is None:
        raise InvalidInput('Numerical answer must be a number')
    return submitted == canonical_number(question.correct_answer)


def evaluate_mock_answers(slots, answers):
    """
    Evaluate submitted answers against the ordered slots of a mock test.

    slots: MockTestQuestion rows. answers: [{'questionNumber', 'selectedAnswer'}].
    Returns (detail rows, counts dict). An unparsable numerical answer in a
    mock test counts as wrong rather than failing the whole submission.
    """
    by_number = {}
    for answer in answers or []:
        number = answer.get('questionNumber')
        if number is not None:
            by_number[int(number)] = answer.get('selectedAnswer')

    detail = []
    correct = wrong = unanswered = 0
    for slot in slots:
        question = slot.question
        selected = by_number.get(slot.serial_number)
        if is_blank(selected):
            is_correct = False
            selected = None
            unanswered += 1
        else:
            try:
                is_correct = check_answer(question, selected)
            except InvalidInput:
                is_correct = False
            if is_correct:
                correct += 1
            else:
                wrong += 1
        detail.append({
            'questionNumber': slot.serial_number,
            'selectedAnswer': selected,
            'correctAnswer': question.correct_answer,
            'isCorrect': is_correct,
        })

    counts = {
        'correct': correct,
        'wrong': wrong,
        'unanswered': unanswered,
        'score': score(correct, wrong),
    }
    return detail, counts


def score(correct, wrong):
    """+4 per correct answer, -1 per wrong answer"""
    return correct * MARKS_CORRECT + wrong * MARKS_WRONG
