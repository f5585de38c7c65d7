"""
Account service tests: skills, portfolio, reviews, withdrawals and role-aware project lookups.
"""
from decimal import Decimal

import pytest

from accounts.models import CustomUser, Review
from accounts.services import AccountService
from conftest import ProjectFactory
from marketplace_api.exceptions import Forbidden, InvalidInput, InvalidState, NotFound
from notifications.models import Notification


@pytest.mark.django_db
class TestSkills:

    def test_add_skills_is_a_set_union(self, freelancer):
        skills = AccountService.add_skills(user=freelancer, skills=['django', 'react', ' react ', 'aws'])

        assert skills == ['python', 'django', 'react', 'aws']
        freelancer.refresh_from_db()
        assert freelancer.skills == ['python', 'django', 'react', 'aws']

    def test_add_skills_rejects_empty_input(self, freelancer):
        with pytest.raises(InvalidInput):
            AccountService.add_skills(user=freelancer, skills=['  '])

    def test_remove_skill(self, freelancer):
        assert AccountService.remove_skill(user=freelancer, skill='python') == ['django']

        with pytest.raises(NotFound):
            AccountService.remove_skill(user=freelancer, skill='cobol')


@pytest.mark.django_db
class TestPortfolio:

    def test_add_and_remove(self, freelancer, other_freelancer):
        item = AccountService.add_portfolio_item(user=freelancer, title="Shop", link="https://shop.example.com")

        with pytest.raises(NotFound):
            AccountService.remove_portfolio_item(user=other_freelancer, item_id=item.pk)

        AccountService.remove_portfolio_item(user=freelancer, item_id=item.pk)
        assert not freelancer.portfolio.exists()


@pytest.mark.django_db
class TestReviews:

    def test_review_is_stored_and_reviewee_notified(self, client_user, freelancer):
        AccountService.review_user(reviewer=client_user, reviewee=freelancer, rating=4, review="Solid work")
        AccountService.review_user(reviewer=client_user, reviewee=freelancer, rating=5)

        assert Review.objects.filter(reviewee=freelancer).count() == 2
        assert freelancer.average_rating == 4.5
        assert Notification.objects.filter(recipient=freelancer, title="New Review").count() == 2

    def test_cannot_review_self(self, freelancer):
        with pytest.raises(Forbidden):
            AccountService.review_user(reviewer=freelancer, reviewee=freelancer, rating=5)


@pytest.mark.django_db
class TestWithdraw:

    def test_moves_amount_from_revenue_to_withdrawn(self, freelancer):
        CustomUser.objects.filter(pk=freelancer.pk).update(revenue=Decimal('900.00'))

        user = AccountService.withdraw(user=freelancer, amount=Decimal('250.00'))

        assert user.revenue == Decimal('650.00')
        assert user.withdrawn == Decimal('250.00')
        notification = Notification.objects.get(recipient=freelancer)
        assert notification.title == "Withdrawal Successful"
        assert notification.type == Notification.TYPE_SUCCESS

    def test_whole_balance_can_be_withdrawn(self, freelancer):
        CustomUser.objects.filter(pk=freelancer.pk).update(revenue=Decimal('100.00'))

        user = AccountService.withdraw(user=freelancer, amount=Decimal('100.00'))

        assert user.revenue == Decimal('0.00')

    def test_insufficient_balance_changes_nothing(self, freelancer):
        CustomUser.objects.filter(pk=freelancer.pk).update(revenue=Decimal('50.00'))

        with pytest.raises(InvalidState, match="Insufficient balance"):
            AccountService.withdraw(user=freelancer, amount=Decimal('50.01'))

        freelancer.refresh_from_db()
        assert freelancer.revenue == Decimal('50.00')
        assert freelancer.withdrawn == Decimal('0.00')
        assert not Notification.objects.filter(recipient=freelancer).exists()

    @pytest.mark.parametrize('amount', [Decimal('0'), Decimal('-5')])
    def test_non_positive_amount_is_invalid(self, freelancer, amount):
        with pytest.raises(InvalidInput):
            AccountService.withdraw(user=freelancer, amount=amount)


@pytest.mark.django_db
class TestActiveProjects:

    def test_dispatches_on_role(self, freelancer, client_user):
        mine = ProjectFactory(freelancer=freelancer, job__created_by=client_user)
        ProjectFactory(freelancer=freelancer, job__created_by=client_user, status='completed')
        ProjectFactory()

        assert list(freelancer.active_projects) == [mine]
        assert list(client_user.active_projects) == [mine]

    def test_admin_has_no_active_projects(self, admin_user):
        ProjectFactory()

        assert not admin_user.active_projects.exists()


@pytest.mark.django_db
class TestDeleteUser:

    def test_user_in_a_project_cannot_be_deleted(self, project):
        with pytest.raises(InvalidState):
            AccountService.delete_user(user=project.freelancer)

        assert CustomUser.objects.filter(pk=project.freelancer_id).exists()

    def test_user_without_history_is_deleted(self, other_freelancer):
        AccountService.delete_user(user=other_freelancer)

        assert not CustomUser.objects.filter(pk=other_freelancer.pk).exists()
