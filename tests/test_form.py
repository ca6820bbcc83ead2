"""
Tests for the StepForm façade.

Focus Areas:
1. Root-relative step reporting for flat and nested forms
2. Construction options
3. End-to-end navigation with the pydantic field engine
"""

import pytest
from pydantic import BaseModel, Field

from steptree import ModelFieldEngine, NavigatorConfig, StepForm, StepValidationMode


class Account(BaseModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=8)


class Profile(BaseModel):
    city: str


class Signup(BaseModel):
    account: Account
    profile: Profile


class TestConstruction:
    """Test StepForm construction."""

    def test_validation_mode_keyword(self, engine):
        form = StepForm(engine, validation_mode="all")
        assert form.navigator.validation_mode is StepValidationMode.ALL

    def test_config_object(self, engine):
        config = NavigatorConfig(validation_mode="none")
        assert StepForm(engine, config).navigator.config is config

    def test_both_options_rejected(self, engine):
        with pytest.raises(ValueError):
            StepForm(engine, NavigatorConfig(), validation_mode="all")

    def test_empty_form(self, engine):
        form = StepForm(engine)
        assert form.current_step == ()
        assert form.current_fields == []
        assert form.is_first_step
        assert form.is_last_step


class TestStepReporting:
    """Test root-relative positions."""

    def test_single_step_is_first_and_last(self, engine):
        form = StepForm(engine)
        form.step().add_field("x")
        assert form.is_first_step
        assert form.is_last_step
        assert form.current_step == 0
        assert form.current_fields == ["x"]

    @pytest.mark.asyncio
    async def test_flat_form(self, engine):
        form = StepForm(engine)
        form.step("one").add_field("f1")
        form.step("two").add_field("f2")

        assert await form.next() is True
        assert form.current_step == 1
        assert form.validated_steps == [0]
        assert form.validated_fields == ["f1"]

        assert await form.jump(0) is True
        assert form.current_step == 0

    @pytest.mark.asyncio
    async def test_nested_form(self, engine):
        form = StepForm(engine)
        section = form.step("section")
        section.group("first").add_field("a")
        section.group("second").add_field("b")
        form.step("last").add_field("c")

        assert form.current_step == (0, 0)
        assert await form.jump((0, 1)) is True
        assert form.current_step == (0, 1)
        assert await form.next() is True
        assert form.current_step == 1
        assert form.current_step_node is not None
        assert form.validated_steps == [(0, 0), (0, 1)]

    def test_close_empties_form(self, engine):
        form = StepForm(engine)
        form.step().add_field("x")
        key = form.registration_key

        form.close()

        assert form.current_step is None
        assert form.registry.tree.children == ()
        assert form.registration_key == key + 1

    def test_root_fields(self, engine):
        form = StepForm(engine)
        assert form.add_field("terms")
        assert form.current_fields == ["terms"]


class TestEndToEnd:
    """Test a complete signup flow against a pydantic model."""

    @pytest.mark.asyncio
    async def test_signup_flow(self):
        engine = ModelFieldEngine(Signup)
        form = StepForm(engine)
        account = form.step("account")
        account.add_field("account.email")
        account.add_field("account.password")
        form.step("profile").add_field("profile.city")
        saved = []

        engine.set_value("account.email", "ada@example.org")
        engine.set_value("account.password", "short")
        assert await form.next(saved.append) is False
        assert "account.password" in engine.errors
        assert form.current_step == 0

        engine.set_value("account.password", "long enough")
        assert await form.next(saved.append) is True
        assert form.current_step == 1
        assert form.is_last_step
        assert saved == [
            {"account": {"email": "ada@example.org", "password": "long enough"}}
        ]

        assert await form.prev() is True
        assert form.current_step == 0
