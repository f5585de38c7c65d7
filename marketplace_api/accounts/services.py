import logging
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import F, ProtectedError

from marketplace_api.exceptions import Forbidden, InvalidInput, InvalidState, NotFound
from notifications.services import notify
from .models import PortfolioItem, Review

User = get_user_model()
logger = logging.getLogger(__name__)


class AccountService:

    @staticmethod
    def add_skills(*, user, skills):
        """Set-union ``skills`` into the user's skill list, keeping first-seen order."""
        cleaned = [s.strip() for s in skills if isinstance(s, str) and s.strip()]
        if not cleaned:
            raise InvalidInput("At least one skill is required.")

        current = list(user.skills or [])
        for skill in cleaned:
            if skill not in current:
                current.append(skill)

        user.skills = current
        user.save(update_fields=['skills'])
        return user.skills

    @staticmethod
    def remove_skill(*, user, skill):
        current = list(user.skills or [])
        if skill not in current:
            raise NotFound("Skill not found.")

        current.remove(skill)
        user.skills = current
        user.save(update_fields=['skills'])
        return user.skills

    @staticmethod
    def add_portfolio_item(*, user, title, description='', link=''):
        return PortfolioItem.objects.create(user=user, title=title, description=description, link=link)

    @staticmethod
    def remove_portfolio_item(*, user, item_id):
        deleted, _ = PortfolioItem.objects.filter(pk=item_id, user=user).delete()
        if not deleted:
            raise NotFound("Portfolio item not found.")

    @staticmethod
    def review_user(*, reviewer, reviewee, rating, review=''):
        if reviewer.pk == reviewee.pk:
            raise Forbidden("You cannot review yourself.")

        entry = Review.objects.create(reviewer=reviewer, reviewee=reviewee, rating=rating, review=review)
        logger.info(f"User {reviewer.id} rated user {reviewee.id} with {rating}")

        notify(
            recipient_id=reviewee.id,
            title="New Review",
            message=f"{reviewer.name} rated you {rating}/5.",
            type='info',
            link=f"/users/{reviewee.id}",
        )
        return entry

    @staticmethod
    def withdraw(*, user, amount):
        """
        Move ``amount`` from revenue to withdrawn in a single conditional UPDATE,
        so concurrent withdrawals can never overdraw the balance.
        """
        amount = Decimal(amount)
        if amount <= 0:
            raise InvalidInput("Amount must be greater than zero.")

        with transaction.atomic():
            updated = User.objects.filter(pk=user.pk, revenue__gte=amount).update(
                revenue=F('revenue') - amount,
                withdrawn=F('withdrawn') + amount,
            )
            if not updated:
                raise InvalidState("Insufficient balance.")

        user.refresh_from_db(fields=['revenue', 'withdrawn'])
        logger.info(f"User {user.id} withdrew {amount}, remaining revenue {user.revenue}")

        notify(
            recipient_id=user.id,
            title="Withdrawal Successful",
            message=f"You have withdrawn {amount}. Remaining balance: {user.revenue}.",
            type='success',
            link='/earnings',
        )
        return user

    @staticmethod
    def delete_user(*, user):
        try:
            user.delete()
        except ProtectedError:
            raise InvalidState("Accounts that are part of a project or payment cannot be deleted.")
        logger.info(f"User {user.email} deleted")
