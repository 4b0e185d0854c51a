import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import HostCreate, HostDB
from scheduling.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


def get_host(db: Session, username: str) -> HostDB:
    host = db.query(HostDB).filter(HostDB.name == username).first()
    if not host:
        raise NotFoundError("Host not found")
    return host


def create_host(db: Session, host: HostCreate) -> HostDB:
    new_host = HostDB(**host.model_dump())
    db.add(new_host)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Host name or email already registered")
    db.refresh(new_host)
    logger.info("Registered host %s", new_host.name)
    return new_host
