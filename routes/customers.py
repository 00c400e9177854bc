import asyncio
import logging
from fastapi import APIRouter, Depends, HTTPException, status, Query, WebSocket, WebSocketDisconnect
from typing import Dict, Any, List, Optional
from core import timewindow
from core.exceptions import DomainError, InvalidInputError
from models.attendance import ISO_DATE_PATTERN
from models.customers import CustomerVisit, CustomerCreate, CustomerCreateResponse, AvailabilityResponse, CountdownMessage
from services.auth_service import require_branch_access, decode_token
from services.customers_service import CustomersService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/branches/{branch_id}/customers", tags=["customers"])


@router.get("", response_model=List[CustomerVisit])
async def get_customers(
    branch_id: str,
    date: Optional[str] = Query(default=None, pattern=ISO_DATE_PATTERN),
    current_user: Dict[str, Any] = Depends(require_branch_access)
):
    """Walk-ins for a day, today by default"""
    service = CustomersService()
    return await service.get_customers(branch_id, date)


@router.get("/availability", response_model=AvailabilityResponse)
async def get_availability(
    branch_id: str,
    current_user: Dict[str, Any] = Depends(require_branch_access)
):
    """
    Today's present therapists split into busy and free.
    `assignable` is the list a new walk-in can be given to.
    """
    service = CustomersService()
    availability = await service.get_availability(branch_id)

    return AvailabilityResponse(
        date=availability.date,
        busy=sorted(availability.snapshot.busy),
        free=sorted(availability.snapshot.free),
        assignable=availability.assignable
    )


@router.post("", response_model=CustomerCreateResponse, status_code=status.HTTP_201_CREATED)
async def add_customer(
    branch_id: str,
    customer: CustomerCreate,
    current_user: Dict[str, Any] = Depends(require_branch_access)
):
    """
    Add a walk-in.
    A busy or absent therapist is rejected with 409 before anything is saved.
    """
    service = CustomersService()

    try:
        result = await service.add_customer(branch_id, customer.model_dump())
    except DomainError:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to add customer: {str(e)}"
        )

    return CustomerCreateResponse(
        success=True,
        customer=result,
        message="Customer added successfully"
    )


@router.put("/{customer_id}/checkout", response_model=CustomerVisit)
async def close_visit(
    branch_id: str,
    customer_id: str,
    current_user: Dict[str, Any] = Depends(require_branch_access)
):
    """Close out a visit; its therapist shows as free again"""
    service = CustomersService()
    return await service.close_visit(branch_id, customer_id)


@router.websocket("/countdown")
async def countdown_socket(
    websocket: WebSocket,
    branch_id: str,
    check_out_time: str,
    token: str,
    customer_id: Optional[str] = None
):
    """
    Push the remaining time until check_out_time once a second.
    The socket is closed after the "Time's up!" message; a client that
    disconnects earlier stops its timer.
    """
    try:
        payload = decode_token(token, websocket.app.state.session)
        if payload.get("branch_id") != branch_id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
        timewindow.parse_hhmm(check_out_time)
    except (HTTPException, InvalidInputError) as e:
        logger.info(f"Countdown refused for branch {branch_id}: {e}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()

    # None in the queue means the client went away
    queue: asyncio.Queue = asyncio.Queue()
    timer = timewindow.CountdownTimer(check_out_time, queue.put_nowait)

    async def watch_for_disconnect():
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
        finally:
            queue.put_nowait(None)

    watcher = asyncio.create_task(watch_for_disconnect())
    timer.start()

    try:
        while True:
            state = await queue.get()
            if state is None:
                logger.info(f"Countdown client for {customer_id or check_out_time} disconnected")
                break
            message = CountdownMessage(
                customer_id=customer_id,
                check_out_time=check_out_time,
                label=state.label,
                expired=state.expired
            )
            await websocket.send_json(message.model_dump())
            if state.expired:
                await websocket.close()
                break
    except WebSocketDisconnect:
        logger.info(f"Countdown client for {customer_id or check_out_time} disconnected")
    finally:
        timer.stop()
        watcher.cancel()
