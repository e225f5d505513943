from datetime import timedelta

from models import db
from models.admin_notification import AdminNotification
from models.feedback import Feedback
from models.payment import Payment
from models.user import User
from utils.payment_gateway import sign_payment
from utils.timeutils import now_utc
from tests.factories import make_gift_code, make_mock_test, make_payment, make_question


def _seed(app, fn):
    with app.app_context():
        return fn()


def test_app_registers_every_blueprint(app):
    rules = {rule.rule for rule in app.url_map.iter_rules()}
    for path in (
        '/api/questions/practice',
        '/api/mocktest/<int:mock_test_id>/start',
        '/api/user/check-limits',
        '/api/subscription/apply-giftcode',
        '/api/payment/verify',
        '/api/payment/refund/calculate',
        '/api/analytics/overview',
        '/api/feedback/submit',
    ):
        assert path in rules


def test_home_and_health_are_public(client):
    assert client.get('/').get_json()['success'] is True

    response = client.get('/api/health')
    assert response.status_code == 200
    assert response.get_json()['database'] == 'ok'


def test_user_routes_require_a_bearer_token(client):
    response = client.get('/api/user/profile')
    assert response.status_code == 401
    assert response.get_json() == {
        'success': False, 'error': 'unauthorized', 'message': 'Authentication required',
    }

    response = client.get('/api/user/profile', headers={'Authorization': 'Bearer not-a-token'})
    assert response.status_code == 401


def test_expired_token_is_rejected(app, client):
    from utils.auth_utils import generate_access_token
    from tests.factories import make_user

    with app.app_context():
        token = generate_access_token(make_user(), lifetime=-10)
    response = client.get('/api/user/profile', headers={'Authorization': f'Bearer {token}'})
    assert response.status_code == 401


def test_unknown_route_is_json(client):
    response = client.get('/api/nope')
    assert response.status_code == 404
    assert response.get_json()['success'] is False


def test_profile_and_limits(client, auth):
    _, headers = auth(tier='silver')

    profile = client.get('/api/user/profile', headers=headers).get_json()
    assert profile['user']['subscriptionType'] == 'silver'
    assert profile['user']['isSubscriptionActive'] is True
    assert profile['user']['dailyLimits']['chapterTests'] == 10
    assert profile['user']['userId'].startswith('USR')

    limits = client.get('/api/user/check-limits', headers=headers).get_json()
    assert limits['canAttemptQuestions'] is True
    assert limits['canAttemptMockTest'] is False
    assert limits['subscriptionType'] == 'silver'


def test_complete_details(app, client, auth):
    user_id, headers = auth()

    response = client.post('/api/user/complete-details', headers=headers, json={
        'name': 'Asha', 'profession': 'teacher', 'grade': '12', 'preparingFor': 'JEE',
        'state': 'Kerala', 'lifeAmbition': 'Teach physics',
    })
    assert response.status_code == 200
    assert response.get_json()['user']['grade'] == 'other'

    with app.app_context():
        user = db.session.get(User, user_id)
        assert user.user_details_completed is True
        assert user.state == 'Kerala'


def test_complete_details_validation(client, auth):
    _, headers = auth()
    response = client.post('/api/user/complete-details', headers=headers, json={
        'name': 'Asha', 'profession': 'student', 'preparingFor': 'NEET',
        'state': 'Goa', 'lifeAmbition': 'x' * 51,
    })
    assert response.status_code == 400
    assert response.get_json()['error'] == 'invalid_input'

    response = client.post('/api/user/complete-details', headers=headers, json={'name': 'Asha'})
    assert response.status_code == 400


def test_select_exam(client, auth):
    _, headers = auth()
    assert client.post('/api/user/select-exam', headers=headers, json={'exam': 'NEET'}).get_json()['selectedExam'] == 'NEET'
    assert client.post('/api/user/select-exam', headers=headers, json={'exam': 'CAT'}).status_code == 400


def test_practice_and_verify_flow(app, client, auth):
    _, headers = auth()
    question_id = _seed(app, lambda: make_question(question_type='NUMERICAL', correct_answer='4.5').id)

    practice = client.post('/api/questions/practice', headers=headers, json={
        'exam': 'JEE', 'subject': 'Physics', 'chapters': ['all'], 'topics': ['all'],
    }).get_json()
    assert [q['_id'] for q in practice['questions']] == [question_id]
    assert 'correctAnswer' not in practice['questions'][0]

    verify = client.post('/api/questions/verify-answer', headers=headers, json={
        'questionId': question_id, 'userAnswer': '4.50', 'timeTaken': 30,
    }).get_json()
    assert verify['success'] is True
    assert verify['isCorrect'] is True

    attempted = client.get('/api/user/attempted-questions', headers=headers).get_json()
    assert attempted['stats'] == {'total': 1, 'correct': 1, 'wrong': 0}

    overview = client.get('/api/analytics/overview', headers=headers).get_json()
    assert overview['analytics'][0]['subject'] == 'Physics'


def test_verify_answer_quota_exceeded(app, client, auth):
    user_id, headers = auth(questions_attempted=50)
    question_id = _seed(app, lambda: make_question().id)

    response = client.post('/api/questions/verify-answer', headers=headers, json={
        'questionId': question_id, 'userAnswer': 'A',
    })

    assert response.status_code == 403
    body = response.get_json()
    assert body['limitReached'] is True
    assert body['error'] == 'quota_exceeded'
    with app.app_context():
        assert db.session.get(User, user_id).questions_attempted == 50


def test_verify_answer_requires_fields(client, auth):
    _, headers = auth()
    response = client.post('/api/questions/verify-answer', headers=headers, json={'userAnswer': 'A'})
    assert response.status_code == 400
    assert response.get_json()['error'] == 'invalid_input'


def test_filter_routes(app, client, auth):
    _, headers = auth()
    _seed(app, lambda: make_question(subject='Physics', chapter='Optics', topic='Lenses'))

    assert client.get('/api/questions/filters?exam=JEE', headers=headers).get_json()['subjects'] == ['Physics']
    assert client.get('/api/questions/chapters?exam=JEE&subject=Physics', headers=headers).get_json()['chapters'] == ['Optics']
    assert client.get('/api/questions/topics?exam=JEE&subject=Physics&chapter=Optics', headers=headers).get_json()['topics'] == ['Lenses']
    assert client.get('/api/questions/chapters?exam=JEE', headers=headers).status_code == 400


def test_generate_test_insufficient_questions(app, client, auth):
    _, headers = auth(tier='gold')
    _seed(app, lambda: make_question())

    response = client.post('/api/questions/generate-test', headers=headers, json={'exam': 'JEE', 'subject': 'Physics'})

    assert response.status_code == 404
    assert response.get_json()['error'] == 'insufficient_questions'


def test_mock_test_flow(app, client, auth):
    user_id, headers = auth(tier='gold')

    def build():
        questions = [make_question(correct_answer='A') for _ in range(3)]
        first = make_mock_test(questions, name='Route Test 1')
        second = make_mock_test(questions, name='Route Test 2')
        return first.id, second.id

    first_id, second_id = _seed(app, build)

    listing = client.get('/api/mocktest/list?exam=JEE', headers=headers).get_json()
    assert {m['status'] for m in listing['mockTests']} == {'unattempted'}

    started = client.post(f'/api/mocktest/{first_id}/start', headers=headers).get_json()
    assert len(started['mockTest']['questions']) == 3
    assert 'correctAnswer' not in started['mockTest']['questions'][0]

    blocked = client.post(f'/api/mocktest/{second_id}/start', headers=headers)
    assert blocked.status_code == 409
    assert blocked.get_json()['ongoingTestId'] == first_id

    not_yet = client.get(f'/api/mocktest/{first_id}/review', headers=headers)
    assert not_yet.status_code == 400

    submitted = client.post(f'/api/mocktest/{first_id}/submit', headers=headers, json={
        'answers': [
            {'questionNumber': 1, 'selectedAnswer': 'A'},
            {'questionNumber': 2, 'selectedAnswer': 'D'},
        ],
        'timeTaken': 600,
    }).get_json()
    assert submitted['results']['score'] == 3
    assert submitted['results']['unanswered'] == 1

    review = client.get(f'/api/mocktest/{first_id}/review', headers=headers).get_json()
    assert review['questions'][0]['correctAnswer'] == 'A'

    again = client.post(f'/api/mocktest/{first_id}/start', headers=headers)
    assert again.status_code == 409
    assert again.get_json()['error'] == 'already_attempted'

    with app.app_context():
        assert db.session.get(User, user_id).ongoing_mock_test_id is None


def test_apply_gift_code_route(app, client, auth):
    _, headers = auth()
    _seed(app, lambda: make_gift_code(code='ROUTEGIFT001', duration='1Y'))

    response = client.post('/api/subscription/apply-giftcode', headers=headers, json={'code': 'ROUTEGIFT001'})
    assert response.status_code == 200
    assert response.get_json()['subscription']['type'] == 'gold'

    reused = client.post('/api/subscription/apply-giftcode', headers=headers, json={'code': 'ROUTEGIFT001'})
    assert reused.status_code == 404


def test_plans_route(client, auth):
    _, headers = auth()
    plans = client.get('/api/subscription/plans', headers=headers).get_json()['plans']
    assert plans['silver']['plans'][0] == {'duration': '1M', 'mrp': 100, 'price': 49, 'savings': 51}


def test_create_order_and_verify_payment(app, client, auth):
    user_id, headers = auth()

    mismatch = client.post('/api/payment/create-order', headers=headers, json={
        'planType': 'gold', 'duration': '1M', 'amount': 1,
    })
    assert mismatch.status_code == 400

    order = client.post('/api/payment/create-order', headers=headers, json={
        'planType': 'gold', 'duration': '1M', 'amount': 299,
    }).get_json()
    assert order['amount'] == 29900
    assert order['currency'] == 'INR'
    assert order['keyId'] == 'key_test_123'

    bad = client.post('/api/payment/verify', headers=headers, json={
        'razorpay_order_id': order['orderId'], 'razorpay_payment_id': 'pay_1', 'razorpay_signature': 'forged',
    })
    assert bad.status_code == 400

    with app.app_context():
        signature = sign_payment(order['orderId'], 'pay_1')
    verified = client.post('/api/payment/verify', headers=headers, json={
        'razorpay_order_id': order['orderId'], 'razorpay_payment_id': 'pay_1', 'razorpay_signature': signature,
    })
    assert verified.status_code == 200
    assert verified.get_json()['subscription']['type'] == 'gold'
    assert verified.get_json()['payment']['status'] == 'success'

    replay = client.post('/api/payment/verify', headers=headers, json={
        'razorpay_order_id': order['orderId'], 'razorpay_payment_id': 'pay_1', 'razorpay_signature': signature,
    })
    assert replay.status_code == 200
    assert replay.get_json()['message'] == 'Payment already verified'

    with app.app_context():
        user = db.session.get(User, user_id)
        payment = Payment.query.filter_by(gateway_order_id=order['orderId']).one()
        assert payment.status == 'success'
        assert user.subscription_type == 'gold'
        assert user.subscription_expiry_date == payment.plan_expiry_date
        assert payment.plan_expiry_date - payment.plan_start_date == timedelta(days=30)


def test_verify_payment_for_unknown_order(app, client, auth):
    _, headers = auth()
    with app.app_context():
        signature = sign_payment('order_missing', 'pay_2')
    response = client.post('/api/payment/verify', headers=headers, json={
        'razorpay_order_id': 'order_missing', 'razorpay_payment_id': 'pay_2', 'razorpay_signature': signature,
    })
    assert response.status_code == 404


def test_refund_routes(app, client, auth):
    _, free_headers = auth()
    calc = client.post('/api/payment/refund/calculate', headers=free_headers)
    assert calc.status_code == 200
    assert calc.get_json()['eligible'] is False

    user_id, headers = auth(tier='gold')

    def pay():
        user = db.session.get(User, user_id)
        make_payment(user, amount=1000, start=now_utc() - timedelta(days=5), days=100)

    _seed(app, pay)

    quote = client.post('/api/payment/refund/calculate', headers=headers).get_json()
    assert quote['eligible'] is True
    assert quote['refundAmount'] == 600

    requested = client.post('/api/payment/refund/request', headers=headers).get_json()
    assert requested['refund'] == {'amount': 600, 'percent': 60, 'status': 'requested'}

    after = client.post('/api/payment/refund/calculate', headers=headers).get_json()
    assert after['eligible'] is False


def test_submit_feedback(app, client, auth):
    user_id, headers = auth()

    response = client.post('/api/feedback/submit', headers=headers, json={
        'feedbackType': 'refund', 'message': 'Plan did not suit me', 'rating': 2,
    })
    assert response.status_code == 200
    feedback = response.get_json()['feedback']
    assert feedback['feedbackType'] == 'refund'
    assert feedback['refundStatus'] == 'incomplete'

    query = client.post('/api/feedback/submit', headers=headers, json={'feedbackType': 'query', 'message': 'Hi'})
    assert query.get_json()['feedback']['refundStatus'] is None

    with app.app_context():
        rows = Feedback.query.filter_by(user_id=user_id).all()
        assert len(rows) == 2
        assert rows[0].email.startswith('student')
        assert AdminNotification.query.filter_by(type='feedback').count() == 2


def test_submit_feedback_validation(client, auth):
    _, headers = auth()
    assert client.post('/api/feedback/submit', headers=headers, json={'feedbackType': 'praise'}).status_code == 400
    assert client.post('/api/feedback/submit', headers=headers, json={
        'feedbackType': 'query', 'rating': 6,
    }).status_code == 400
