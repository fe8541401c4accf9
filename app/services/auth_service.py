"""
Auth service.

Sign-up and sign-in against the members table. Sign-up creates the
member, its wallet and its placement in one transaction.
"""

import secrets
import string

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import REFERRAL_CODE_LENGTH
from app.config.settings import settings
from app.models.enums import PlacementSide
from app.models.member import Member
from app.repositories.member_repository import MemberRepository
from app.repositories.wallet_repository import WalletRepository
from app.schemas.member import MemberProfile
from app.services.base_service import BaseService
from app.services.eligibility_service import EligibilityService
from app.services.network import NetworkStore
from app.utils.db_decorators import with_auto_commit
from app.utils.exceptions import (
    AuthenticationFailedError,
    SponsorNotFoundError,
    ValidationFailedError,
)
from app.validators import (
    validate_email,
    validate_name,
    validate_password,
    validate_phone,
    validate_referral_code,
    validate_side,
)


REFERRAL_CODE_ALPHABET = string.ascii_uppercase + string.digits
MAX_CODE_ATTEMPTS = 10


class AuthService(BaseService):
    """Member registration and login."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize auth service."""
        super().__init__(session)
        self.member_repo = MemberRepository(session)
        self.wallet_repo = WalletRepository(session)
        self.store = NetworkStore(session)
        self.eligibility = EligibilityService(session, network_store=self.store)

    @with_auto_commit
    async def sign_up(
        self,
        email: str,
        password: str,
        name: str,
        mobile: str,
        sponsor_code: str | None = None,
        side: str | None = None,
    ) -> MemberProfile:
        """
        Register a member.

        With a sponsor code the member is placed under that sponsor on
        ``side`` (else the sponsor's preferred side, else left), spilling
        over when the slot is taken. Without one it becomes a root.

        Args:
            email: Login email
            password: Plain text password
            name: Display name
            mobile: Contact number
            sponsor_code: Referral code of the sponsor
            side: Requested leg under the sponsor

        Returns:
            Profile of the new member

        Raises:
            ValidationFailedError: If any field is invalid or the email is taken
            SponsorNotFoundError: If the sponsor code does not resolve
        """
        for validator, value in (
            (validate_email, email),
            (validate_password, password),
            (validate_name, name),
            (validate_phone, mobile),
        ):
            is_valid, error = validator(value)
            if not is_valid:
                raise ValidationFailedError(error)

        email = email.strip().lower()
        if await self.member_repo.get_by_email(email) is not None:
            raise ValidationFailedError("Email is already registered")

        sponsor: Member | None = None
        if sponsor_code:
            is_valid, error = validate_referral_code(sponsor_code)
            if not is_valid:
                raise ValidationFailedError(error)
            sponsor = await self.member_repo.get_by_referral_code(sponsor_code)
            if sponsor is None:
                raise SponsorNotFoundError(sponsor_code.strip().upper())

        if side is not None:
            is_valid, error = validate_side(side)
            if not is_valid:
                raise ValidationFailedError(error)

        member = Member(
            name=name.strip(),
            email=email,
            mobile=mobile.strip(),
            referral_code=await self._generate_referral_code(),
            referrer_id=sponsor.id if sponsor else None,
        )
        member.set_password(password, rounds=settings.bcrypt_rounds)
        self.session.add(member)
        await self.session.flush()
        await self.session.refresh(member)

        await self.wallet_repo.create(member_id=member.id)

        if sponsor is None:
            await self.store.place_root(member.id)
        else:
            placement_side = PlacementSide(
                (side or sponsor.preferred_side or PlacementSide.LEFT.value).strip().lower()
            )
            await self.store.place_member(member.id, sponsor.id, placement_side)
            await self.eligibility.refresh_referral_levels(sponsor.id)

        self.logger.info(
            f"Member {member.member_code} signed up",
            extra={
                "member_id": member.id,
                "sponsor_id": sponsor.id if sponsor else None,
            },
        )
        return MemberProfile.model_validate(member)

    async def sign_in(self, email: str, password: str) -> int:
        """
        Check credentials.

        Args:
            email: Login email
            password: Plain text password

        Returns:
            Member ID

        Raises:
            AuthenticationFailedError: If the email or password is wrong
        """
        member = await self.member_repo.get_by_email(email or "")
        if member is None or not member.verify_password(password or ""):
            self.logger.warning("Failed sign-in attempt", extra={"email": email})
            raise AuthenticationFailedError("Invalid email or password")
        return member.id

    async def _generate_referral_code(self) -> str:
        for _ in range(MAX_CODE_ATTEMPTS):
            code = "".join(
                secrets.choice(REFERRAL_CODE_ALPHABET)
                for _ in range(REFERRAL_CODE_LENGTH)
            )
            if not await self.member_repo.referral_code_exists(code):
                return code
        raise RuntimeError("Could not generate a unique referral code")
