from fastapi import APIRouter

from ticketpro.api.routes import auth, bookings, group_tickets, health, ticket_batches, umrah

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])  # GET /
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])  # POST /login, /login-json, GET /me
api_router.include_router(group_tickets.router, prefix="/umrah/group-tickets", tags=["group-tickets"])
api_router.include_router(umrah.router, prefix="/umrah", tags=["umrah"])  # with-transport, without-transport
api_router.include_router(ticket_batches.router, prefix="/ticket-batches", tags=["ticket-batches"])
api_router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
