from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from models import Host, HostCreate
from scheduling.errors import SchedulingError
from scheduling.hosts import create_host, get_host

host_router = APIRouter(
    tags=["Host"]
)

@host_router.post("/hosts", response_model=Host, tags=["Host"])
def register_host(host: HostCreate, db: Session = Depends(get_db)):
    
    try:
        return create_host(db, host)
    except SchedulingError:
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))

@host_router.get("/hosts/{username}", response_model=Host, tags=["Host"])
def read_host(username: str, db: Session = Depends(get_db)):
    return get_host(db, username)
