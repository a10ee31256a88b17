"""
Tests for models/tool_agent.py — SceneContext, AgentResponse, CommandOutcome.

Pure Pydantic, no mocks needed.
"""

from models.tool_agent import (
    AgentResponse,
    CommandOutcome,
    CommandStatus,
    FoundryCommand,
    SceneContext,
)


class TestSceneContext:

    def test_from_scene(self):
        ctx = SceneContext.from_scene({
            "name": "Goblin Cave",
            "width": 4000,
            "height": 3000,
            "tokens": [{}, {}],
        })
        assert ctx.scene_name == "Goblin Cave"
        assert ctx.scene_active is True
        assert ctx.token_count == 2
        assert ctx.scene_size.width == 4000

    def test_payload_uses_wire_keys(self):
        ctx = SceneContext.from_scene({"name": "Crypt", "width": 1200, "height": 800, "tokens": []})
        assert ctx.to_payload() == {
            "sceneName": "Crypt",
            "sceneActive": True,
            "tokenCount": 0,
            "sceneSize": {"width": 1200, "height": 800},
        }

    def test_no_scene_is_empty_record(self):
        assert SceneContext.from_scene(None).to_payload() == {}
        assert SceneContext.from_scene({}).to_payload() == {}

    def test_missing_tokens_and_size(self):
        ctx = SceneContext.from_scene({"name": "Void"})
        payload = ctx.to_payload()
        assert payload["tokenCount"] == 0
        assert payload["sceneSize"] == {"width": 0, "height": 0}


class TestAgentResponse:

    def test_full_response(self):
        resp = AgentResponse.model_validate({
            "narrative": "Move token",
            "foundry_commands": [{"raw": "move(1,2)"}, {"raw": "say('hi')"}],
        })
        assert resp.narrative == "Move token"
        assert [c.raw for c in resp.foundry_commands] == ["move(1,2)", "say('hi')"]

    def test_empty_body(self):
        resp = AgentResponse.model_validate({})
        assert resp.narrative == ""
        assert resp.foundry_commands == []

    def test_null_fields(self):
        resp = AgentResponse.model_validate({"narrative": None, "foundry_commands": None})
        assert resp.narrative == ""
        assert resp.foundry_commands == []

    def test_non_list_commands_dropped(self):
        resp = AgentResponse.model_validate({"narrative": "x", "foundry_commands": {"raw": "a"}})
        assert resp.foundry_commands == []

    def test_bare_string_commands(self):
        resp = AgentResponse.model_validate({"foundry_commands": ["roll(1d20)"]})
        assert resp.foundry_commands[0].raw == "roll(1d20)"

    def test_non_string_raw_is_shown_as_text(self):
        resp = AgentResponse.model_validate({"foundry_commands": [{"raw": 42}, {"raw": None}]})
        assert [c.raw for c in resp.foundry_commands] == ["42", ""]

    def test_extra_fields_kept(self):
        resp = AgentResponse.model_validate({
            "narrative": "x",
            "foundry_commands": [{"raw": "a", "action": "move"}],
            "confidence": 0.8,
        })
        assert resp.model_extra["confidence"] == 0.8
        assert resp.foundry_commands[0].model_extra["action"] == "move"

    def test_non_string_narrative(self):
        resp = AgentResponse.model_validate({"narrative": 7})
        assert resp.narrative == "7"


class TestCommandOutcome:

    def test_ok_only_when_completed(self):
        done = CommandOutcome(command="a", status=CommandStatus.COMPLETED, response=AgentResponse())
        failed = CommandOutcome(command="a", status=CommandStatus.FAILED, error="boom")
        rejected = CommandOutcome(command="a", status=CommandStatus.REJECTED)
        assert done.ok is True
        assert failed.ok is False
        assert rejected.ok is False

    def test_status_values(self):
        assert CommandStatus("rejected") is CommandStatus.REJECTED
        assert FoundryCommand().raw == ""
