#!/usr/bin/env python3
"""
Web API for the Nexus design studio.

Features:
- Stage 1: Identity - who is asking, optional thought refinement
- Stage 2: Intent - toggle strategic intents, live engine preview
- Stage 3: Canvas - mission fixed, co-pilot chat with agent routing (canvas only)

Run:
    python3 web_studio.py

Then call the JSON API on http://localhost:5002
"""

import secrets
import threading

from flask import Flask, request, jsonify

from nexus_studio.agents.inquire_session import InquireSession
from nexus_studio.agents.responders import AgentResponder, ThoughtRefiner
from nexus_studio.agents.studio_agent import DesignStudioAgent, StudioStage
from nexus_studio.catalog import load_catalogs
from nexus_studio.config import StudioConfig, configure_logging
from nexus_studio.errors import (
    EmptyRequestError,
    IdentityIncompleteError,
    RequestInFlightError,
    SessionClosedError,
    StageTransitionError,
)

config = StudioConfig.from_env()
configure_logging(config.log_level)
catalogs = load_catalogs(config.catalog_dir)

app = Flask(__name__)

# Studio sessions per session_id
sessions = {}
sessions_lock = threading.Lock()


class StudioSession:
    """Wizard state and co-pilot chat for one browser session."""

    def __init__(self):
        self.agent = DesignStudioAgent(
            refiner=ThoughtRefiner(settings=config),
            catalogs=catalogs,
        )
        self.chat = None

    def ensure_chat(self) -> InquireSession:
        if self.chat is None:
            self.chat = InquireSession(
                AgentResponder(settings=config),
                context=self.agent.params.org_context(),
            )
        return self.chat

    def close(self):
        if self.chat is not None:
            self.chat.close()


def _session_id():
    if request.method == 'GET':
        return request.args.get('session_id')
    data = request.get_json(silent=True) or {}
    return data.get('session_id')


def _get_session():
    with sessions_lock:
        return sessions.get(_session_id())


def _invalid_session():
    return jsonify({'error': 'Invalid session'}), 400


def _chat_unavailable(session):
    if session.agent.stage != StudioStage.CANVAS:
        return jsonify({'error': 'Chat is available on the canvas stage only'}), 400
    return None


def _stage_payload(session):
    agent = session.agent
    return {
        'stage': agent.stage.value,
        'progress': agent.get_progress(),
    }


@app.route('/')
def index():
    return jsonify({
        'service': 'nexus-studio',
        'intents': len(catalogs.intents),
        'modules': len(catalogs.modules),
    })


@app.route('/api/session/start', methods=['POST'])
def start_session():
    session_id = secrets.token_hex(8)
    session = StudioSession()
    with sessions_lock:
        sessions[session_id] = session

    return jsonify({'session_id': session_id, **_stage_payload(session)})


@app.route('/api/session/end', methods=['POST'])
def end_session():
    with sessions_lock:
        session = sessions.pop(_session_id(), None)
    if session is None:
        return _invalid_session()

    session.close()
    return jsonify({'ended': True, 'summary': session.agent.get_summary()})


@app.route('/api/identity', methods=['POST'])
def update_identity():
    session = _get_session()
    if session is None:
        return _invalid_session()

    data = request.get_json(silent=True) or {}
    fields = {k: v for k, v in data.items() if k != 'session_id'}
    try:
        params = session.agent.update_identity(**fields)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    return jsonify({
        'params': params.to_dict(),
        'subtypes': session.agent.organization_subtypes(),
        'show_custom_type_input': session.agent.show_custom_type_input,
        'show_custom_category_input': session.agent.show_custom_category_input,
        'missing': params.missing_identity_fields(),
    })


@app.route('/api/identity/complete', methods=['POST'])
def complete_identity():
    session = _get_session()
    if session is None:
        return _invalid_session()

    try:
        session.agent.complete_identity()
    except IdentityIncompleteError as e:
        return jsonify({'error': str(e), 'missing': e.missing}), 400

    return jsonify(_stage_payload(session))


@app.route('/api/refine', methods=['POST'])
def refine_thought():
    session = _get_session()
    if session is None:
        return _invalid_session()

    data = request.get_json(silent=True) or {}
    if data.get('initial_thought') is not None:
        session.agent.update_identity(initial_thought=data['initial_thought'])

    refined = session.agent.refine_thought()
    return jsonify({
        'available': refined is not None,
        'problem_statement': session.agent.params.problem_statement,
    })


@app.route('/api/upload', methods=['POST'])
def upload_document():
    session = _get_session()
    if session is None:
        return _invalid_session()

    data = request.get_json(silent=True) or {}
    filename = data.get('filename', '')
    if not filename:
        return jsonify({'error': 'No filename provided'}), 400

    session.agent.attach_document(filename)
    return jsonify({'uploaded_file_name': session.agent.params.uploaded_file_name})


@app.route('/api/intents', methods=['GET'])
def list_intents():
    session = _get_session()
    if session is None:
        return _invalid_session()

    return jsonify({'intents': session.agent.intent_cards()})


@app.route('/api/intents/toggle', methods=['POST'])
def toggle_intent():
    session = _get_session()
    if session is None:
        return _invalid_session()

    data = request.get_json(silent=True) or {}
    intent_id = data.get('intent_id')
    if not intent_id:
        return jsonify({'error': 'No intent_id provided'}), 400

    selected = session.agent.toggle_intent(intent_id)
    return jsonify({
        'selected_intents': selected,
        'primary_intent': session.agent.params.primary_intent,
        'preview': session.agent.preview().to_dict(catalogs),
    })


@app.route('/api/intents/back', methods=['POST'])
def back_to_identity():
    session = _get_session()
    if session is None:
        return _invalid_session()

    session.agent.back_to_identity()
    return jsonify(_stage_payload(session))


@app.route('/api/preview', methods=['GET'])
def preview():
    session = _get_session()
    if session is None:
        return _invalid_session()

    return jsonify(session.agent.preview().to_dict(catalogs))


@app.route('/api/canvas', methods=['POST'])
def proceed_to_canvas():
    session = _get_session()
    if session is None:
        return _invalid_session()

    try:
        session.agent.proceed_to_canvas()
    except StageTransitionError as e:
        return jsonify({'error': str(e)}), 400

    return jsonify({
        **_stage_payload(session),
        'problem_statement': session.agent.params.problem_statement,
    })


@app.route('/api/canvas/back', methods=['POST'])
def back_to_intent():
    session = _get_session()
    if session is None:
        return _invalid_session()

    session.agent.back_to_intent()
    return jsonify(_stage_payload(session))


@app.route('/api/chat', methods=['GET'])
def chat_state():
    session = _get_session()
    if session is None:
        return _invalid_session()
    unavailable = _chat_unavailable(session)
    if unavailable:
        return unavailable

    return jsonify(session.ensure_chat().get_state())


@app.route('/api/chat', methods=['POST'])
def chat_submit():
    session = _get_session()
    if session is None:
        return _invalid_session()
    unavailable = _chat_unavailable(session)
    if unavailable:
        return unavailable

    data = request.get_json(silent=True) or {}
    chat = session.ensure_chat()
    chat.context = session.agent.params.org_context()

    try:
        message = chat.submit(data.get('text', ''))
    except EmptyRequestError as e:
        return jsonify({'error': str(e)}), 400
    except RequestInFlightError as e:
        return jsonify({'error': str(e)}), 409
    except SessionClosedError as e:
        return jsonify({'error': str(e)}), 410

    if message is None:
        return jsonify({'error': 'Chat session closed before the reply arrived'}), 410

    return jsonify({
        'message': message.to_dict(),
        'display_sources': [s.to_dict() for s in message.display_sources()],
    })


@app.route('/api/chat/close', methods=['POST'])
def chat_close():
    session = _get_session()
    if session is None:
        return _invalid_session()

    if session.chat is not None:
        session.chat.close()
    return jsonify({'closed': True})


if __name__ == '__main__':
    print("""
╔═══════════════════════════════════════════════════════════════╗
║     NEXUS INTELLIGENCE SYSTEM - DESIGN STUDIO API              ║
╠═══════════════════════════════════════════════════════════════╣
║  Stage 1: Identity - Establish point of view                   ║
║  Stage 2: Intent - Compose the engine pipeline                 ║
║  Stage 3: Canvas - Co-pilot with Scout, Strategist, Diplomat   ║
╚═══════════════════════════════════════════════════════════════╝

Listening on http://localhost:5002
    """)

    app.run(debug=True, host='0.0.0.0', port=5002)
