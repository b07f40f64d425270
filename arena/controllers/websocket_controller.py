"""
Controlador WebSocket - Canal de notificaciones en tiempo real

Mensajes del cliente:
- {"type": "joinWallet", "address": "0x..."}  -> recibe walletUpdate de esa wallet
- {"type": "leaveWallet", "address": "0x..."}
- {"type": "ping"}                             -> {"type": "pong"}
"""

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from arena.services.address_registry import is_valid_address

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def realtime_updates(websocket: WebSocket):
    manager = websocket.app.state.arena.broadcaster
    await manager.connect(websocket)
    logger.info("👤 Client connected")

    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except ValueError:
                await manager.send_personal(websocket, "error", {"message": "Invalid JSON"})
                continue

            if not isinstance(message, dict):
                await manager.send_personal(websocket, "error", {"message": "Invalid message"})
                continue

            message_type = message.get("type")
            address = message.get("address")

            if message_type in ("joinWallet", "leaveWallet"):
                if not is_valid_address(address):
                    await manager.send_personal(websocket, "error", {"message": "Invalid address"})
                    continue
                if message_type == "joinWallet":
                    manager.join_room(websocket, address.lower())
                    await manager.send_personal(websocket, "joined", {"address": address.lower()})
                else:
                    manager.leave_room(websocket, address.lower())
                    await manager.send_personal(websocket, "left", {"address": address.lower()})

            elif message_type == "ping":
                await manager.send_personal(websocket, "pong")

    except WebSocketDisconnect:
        logger.info("👤 Client disconnected")
    finally:
        manager.disconnect(websocket)
