# dental_intake/routes/wizard_routes.py
from fastapi import APIRouter, HTTPException, status

from dental_intake.schemas.wizard import WizardSession, WizardState, WizardTransitionRequest
from dental_intake.services import wizard

router = APIRouter(prefix="/api/wizard", tags=["wizard"])


def _state(session: WizardSession) -> WizardState:
    return WizardState(
        session=session,
        step_title=wizard.step_title(session.step),
        can_proceed=wizard.can_proceed(session),
        progress=wizard.progress(session),
    )


@router.post("/start", response_model=WizardState, status_code=status.HTTP_201_CREATED)
def start():
    return _state(wizard.new_session())


@router.post("/transition", response_model=WizardState)
def transition(payload: WizardTransitionRequest):
    """Apply one wizard action to the client-held session and return the new session."""
    session = payload.session
    action = payload.action
    try:
        if action == "select_reason":
            if payload.reason is None:
                raise wizard.WizardError("reason is required")
            session = wizard.select_reason(session, payload.reason)
        elif action == "toggle_symptom":
            if not payload.symptom_id:
                raise wizard.WizardError("symptom_id is required")
            session = wizard.toggle_symptom(session, payload.symptom_id)
        elif action == "set_urgency":
            if payload.urgency is None:
                raise wizard.WizardError("urgency is required")
            session = wizard.set_urgency(session, payload.urgency)
        elif action == "add_photos":
            session = wizard.add_photos(session, payload.photos)
        elif action == "remove_photo":
            if payload.index is None:
                raise wizard.WizardError("index is required")
            session = wizard.remove_photo(session, payload.index)
        elif action == "next":
            session = wizard.advance(session)
        elif action == "back":
            session = wizard.back(session)
    except wizard.WizardError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _state(session)
