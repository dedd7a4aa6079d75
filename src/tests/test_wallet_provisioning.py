from unittest.mock import MagicMock, patch
import uuid

import pytest
import requests
from sqlalchemy.exc import OperationalError
from sqlmodel import Session, select

from core.config import settings
from core.errors import (
    AuthorizationError,
    InternalError,
    InvalidName,
    MissingField,
    NotFoundError,
    ProvisioningFailed,
)
from models.team import Team
from models.team_member import TeamMember, TeamRole
from schemas import ProvisionedWallet, WalletAddress
from services import team_service, wallet_provisioning_service

PUBLIC_ADDRESS = "4Nd1mBQtrMJVYVfKf2PJy9NZUZdTAsp7D4xWLs4gDB4T"


def backend_response(ok=True, status_code=200, payload=None):
    response = MagicMock()
    response.ok = ok
    response.status_code = status_code
    if payload is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def team(db_session: Session, owner):
    return team_service.create_team(db_session, "Acme Corp", owner.id)


@patch("services.wallet_provisioning_service.requests.post")
def test_provision_relays_backend_result(mock_post):
    owner_id = uuid.uuid4()
    mock_post.return_value = backend_response(
        payload={"publicAddress": PUBLIC_ADDRESS, "id": "w-1", "teamName": "Acme Corp"}
    )

    wallet = wallet_provisioning_service.provision("Acme Corp", owner_id, owner_id)

    assert wallet.public_address == PUBLIC_ADDRESS
    assert wallet.id == "w-1"
    assert wallet.team_name == "Acme Corp"
    mock_post.assert_called_once_with(
        f"{settings.WALLET_BACKEND_URL}/api/wallet/generate",
        json={"teamName": "Acme Corp", "owner": str(owner_id), "userId": str(owner_id)},
        timeout=settings.WALLET_BACKEND_TIMEOUT,
    )


@patch("services.wallet_provisioning_service.requests.post")
def test_provision_surfaces_upstream_message(mock_post):
    mock_post.return_value = backend_response(
        ok=False, status_code=502, payload={"error": "Key vault unavailable"}
    )

    with pytest.raises(ProvisioningFailed) as exc_info:
        wallet_provisioning_service.provision("Acme Corp", uuid.uuid4(), uuid.uuid4())

    assert exc_info.value.message == "Key vault unavailable"
    assert mock_post.call_count == 1


@patch("services.wallet_provisioning_service.requests.post")
def test_provision_generic_failure_without_message(mock_post):
    mock_post.return_value = backend_response(ok=False, status_code=500)

    with pytest.raises(ProvisioningFailed) as exc_info:
        wallet_provisioning_service.provision("Acme Corp", uuid.uuid4(), uuid.uuid4())

    assert exc_info.value.message == "Failed to generate wallet"


@patch("services.wallet_provisioning_service.requests.post")
def test_provision_unreachable_backend(mock_post):
    mock_post.side_effect = requests.ConnectionError("refused")

    with pytest.raises(ProvisioningFailed):
        wallet_provisioning_service.provision("Acme Corp", uuid.uuid4(), uuid.uuid4())

    assert mock_post.call_count == 1


@patch("services.wallet_provisioning_service.requests.post")
def test_provision_malformed_success_body(mock_post):
    mock_post.return_value = backend_response(payload={"id": "w-1"})

    with pytest.raises(ProvisioningFailed):
        wallet_provisioning_service.provision("Acme Corp", uuid.uuid4(), uuid.uuid4())


@patch("services.wallet_provisioning_service.requests.post")
def test_provision_maps_address_to_configured_chain(mock_post):
    mock_post.return_value = backend_response(payload={"publicAddress": PUBLIC_ADDRESS, "id": 3})

    wallet = wallet_provisioning_service.provision("Acme Corp", uuid.uuid4(), uuid.uuid4())

    assert wallet.team_name == "Acme Corp"
    assert wallet.wallet_address == WalletAddress(
        chain=settings.WALLET_CHAIN, address=PUBLIC_ADDRESS
    )
    assert "wallet_address" not in wallet.model_dump(by_alias=True)


def generated_wallet(team_name="Acme Corp"):
    return ProvisionedWallet(
        public_address=PUBLIC_ADDRESS,
        id="w-1",
        team_name=team_name,
        wallet_address=WalletAddress(chain="solana", address=PUBLIC_ADDRESS),
    )


@patch("services.wallet_provisioning_service.provision")
def test_generate_for_owner(mock_provision, db_session: Session, owner, team):
    mock_provision.return_value = generated_wallet()

    wallet_provisioning_service.generate_team_wallet(db_session, owner.id, team_id=team.id)

    mock_provision.assert_called_once_with("Acme Corp", owner.id, owner.id)


@patch("services.wallet_provisioning_service.provision")
def test_generate_records_wallet_on_existing_team(mock_provision, db_session: Session, owner, team):
    mock_provision.return_value = generated_wallet()

    wallet_provisioning_service.generate_team_wallet(db_session, owner.id, team_id=team.id)
    wallet_provisioning_service.generate_team_wallet(db_session, owner.id, team_id=team.id)

    db_session.refresh(team)
    assert team.wallet_addresses == [{"chain": "solana", "address": PUBLIC_ADDRESS}]


@patch("services.wallet_provisioning_service.provision")
def test_generate_store_failure_after_provisioning(
    mock_provision, db_session: Session, owner, team
):
    mock_provision.return_value = generated_wallet()

    with patch.object(db_session, "commit", side_effect=OperationalError("UPDATE", {}, Exception())):
        with pytest.raises(InternalError):
            wallet_provisioning_service.generate_team_wallet(
                db_session, owner.id, team_id=team.id
            )

    db_session.refresh(team)
    assert team.wallet_addresses == []


@patch("services.wallet_provisioning_service.provision")
def test_generate_for_member_uses_team_owner(
    mock_provision, db_session: Session, owner, other_user, team
):
    mock_provision.return_value = generated_wallet()
    db_session.add(TeamMember(team_id=team.id, user_id=other_user.id, role=TeamRole.member))
    db_session.commit()

    wallet_provisioning_service.generate_team_wallet(
        db_session, other_user.id, team_name="acme corp"
    )

    mock_provision.assert_called_once_with("Acme Corp", owner.id, other_user.id)


@patch("services.wallet_provisioning_service.provision")
def test_generate_denied_for_non_member(mock_provision, db_session: Session, other_user, team):
    with pytest.raises(AuthorizationError):
        wallet_provisioning_service.generate_team_wallet(
            db_session, other_user.id, team_id=team.id
        )

    mock_provision.assert_not_called()


@patch("services.wallet_provisioning_service.provision")
def test_generate_for_new_team(mock_provision, db_session: Session, other_user):
    mock_provision.return_value = generated_wallet("Fresh Team")

    wallet_provisioning_service.generate_team_wallet(
        db_session, other_user.id, team_name="  Fresh Team "
    )

    mock_provision.assert_called_once_with("Fresh Team", other_user.id, other_user.id)
    assert db_session.exec(select(Team)).all() == []


@patch("services.wallet_provisioning_service.provision")
def test_generate_rejects_invalid_new_name(mock_provision, db_session: Session, other_user):
    with pytest.raises(InvalidName):
        wallet_provisioning_service.generate_team_wallet(
            db_session, other_user.id, team_name="Fresh Team!"
        )

    mock_provision.assert_not_called()


@patch("services.wallet_provisioning_service.provision")
def test_generate_missing_fields(mock_provision, db_session: Session, owner):
    with pytest.raises(MissingField):
        wallet_provisioning_service.generate_team_wallet(db_session, None, team_name="Acme Corp")
    with pytest.raises(MissingField):
        wallet_provisioning_service.generate_team_wallet(db_session, owner.id)

    mock_provision.assert_not_called()


@patch("services.wallet_provisioning_service.provision")
def test_generate_unknown_team_id(mock_provision, db_session: Session, owner):
    with pytest.raises(NotFoundError):
        wallet_provisioning_service.generate_team_wallet(
            db_session, owner.id, team_id=uuid.uuid4()
        )

    mock_provision.assert_not_called()
