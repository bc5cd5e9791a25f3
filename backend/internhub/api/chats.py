"""Direct messaging endpoints."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..domain.models import AppUser, Chat, Message
from ..domain.schemas import ChatCreate, MessageCreate, OperationOut, StartChat
from ..services.session import Workspace
from .deps import current_user, ensure, get_workspace

router = APIRouter(prefix="/chats", tags=["chats"])


def _own_chat(ws: Workspace, chat_id: str, user: AppUser) -> Chat:
    chat = ws.store.get_chat(chat_id)
    if chat is None:
        raise HTTPException(status_code=404, detail="Chat not found")
    if user.id not in chat.participant_ids:
        raise HTTPException(status_code=403, detail="Not a participant")
    return chat


@router.get("")
async def list_chats(
    search: str = "",
    ws: Workspace = Depends(get_workspace),
    user: AppUser = Depends(current_user),
) -> List[Chat]:
    return ws.messaging.user_chats(user.id, search)


@router.get("/unread")
async def unread(
    ws: Workspace = Depends(get_workspace), user: AppUser = Depends(current_user)
) -> dict:
    return {"unread": ws.messaging.unread_total(user.id)}


@router.post("", status_code=201)
async def create_chat(
    body: ChatCreate, ws: Workspace = Depends(get_workspace), user: AppUser = Depends(current_user)
) -> OperationOut:
    chat_id = await ws.messaging.create_chat(body.participant_ids, body.participant_names)
    if not chat_id:
        raise HTTPException(status_code=400, detail="Failed to create chat")
    return OperationOut(success=True, id=chat_id)


@router.post("/start")
async def start_chat(
    body: StartChat, ws: Workspace = Depends(get_workspace), user: AppUser = Depends(current_user)
) -> OperationOut:
    chat_id = await ws.messaging.start_chat(body.other_id)
    if not chat_id:
        raise HTTPException(status_code=400, detail="Could not start chat")
    return OperationOut(success=True, id=chat_id)


@router.get("/{chat_id}/messages")
async def list_messages(
    chat_id: str, ws: Workspace = Depends(get_workspace), user: AppUser = Depends(current_user)
) -> List[Message]:
    _own_chat(ws, chat_id, user)
    return await ws.messaging.load_messages(chat_id)


@router.post("/{chat_id}/messages", status_code=201)
async def send_message(
    chat_id: str,
    body: MessageCreate,
    ws: Workspace = Depends(get_workspace),
    user: AppUser = Depends(current_user),
) -> OperationOut:
    _own_chat(ws, chat_id, user)
    return ensure(await ws.messaging.send_message(chat_id, body.content, user.id, user.name))


@router.post("/{chat_id}/read")
async def mark_read(
    chat_id: str, ws: Workspace = Depends(get_workspace), user: AppUser = Depends(current_user)
) -> Chat:
    _own_chat(ws, chat_id, user)
    await ws.messaging.mark_messages_as_read(chat_id, user.id)
    return ws.store.get_chat(chat_id)
