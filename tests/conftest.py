"""Shared record factories for deduplication tests"""

import json

import pytest

from artifact_dedup.models.dedup import FieldWeights, SimilarityConfig
from artifact_dedup.models.metadata import (
    AIAgentMetadata,
    ToolMetadata,
    WorkflowMetadata,
)


def _workflow(id="wf-1", **fields) -> WorkflowMetadata:
    fields.setdefault("name", "Send Slack Notification")
    fields.setdefault("source", "n8n")
    return WorkflowMetadata(id=id, **fields)


def _agent(id="agent-1", **fields) -> AIAgentMetadata:
    fields.setdefault("name", "Customer Support Assistant")
    fields.setdefault("source", "openai_gpts")
    return AIAgentMetadata(id=id, **fields)


def _tool(id="tool-1", **fields) -> ToolMetadata:
    fields.setdefault("name", "PDF Converter")
    fields.setdefault("source", "github")
    return ToolMetadata(id=id, **fields)


@pytest.fixture
def make_workflow():
    """Factory for workflow records with sensible defaults"""
    return _workflow


@pytest.fixture
def make_agent():
    """Factory for AI agent records with sensible defaults"""
    return _agent


@pytest.fixture
def make_tool():
    """Factory for tool records with sensible defaults"""
    return _tool


@pytest.fixture
def default_config():
    return SimilarityConfig()


@pytest.fixture
def tags_only_config():
    """Config that scores on tag overlap alone, for exact arithmetic"""
    return SimilarityConfig(
        field_weights=FieldWeights(
            name=0.0,
            description=0.0,
            tags=1.0,
            category=0.0,
            type_specific=0.0,
            source=0.0,
            version=0.0,
        )
    )


@pytest.fixture
def slack_pair(make_workflow):
    """Same workflow published on two sources with cosmetic name drift"""
    return [
        make_workflow(
            id="wf-n8n",
            name="Send Slack Notification",
            tags=["slack", "notify"],
            category="comms",
            source="n8n",
        ),
        make_workflow(
            id="wf-zapier",
            name="send slack notification ",
            tags=["slack", "notify"],
            category="comms",
            source="zapier",
        ),
    ]


@pytest.fixture
def unrelated_agents(make_agent):
    """Two agents sharing 1 of 4 tags, different names and models"""
    return [
        make_agent(
            id="agent-support",
            name="Customer Support Assistant",
            tags=["support", "chat", "crm"],
            category="customer_service",
            model="gpt-4",
            provider="openai",
            capabilities=["answer_questions"],
            source="openai_gpts",
        ),
        make_agent(
            id="agent-invoice",
            name="Invoice Data Extractor",
            tags=["support", "finance"],
            category="finance",
            model="claude-3",
            provider="anthropic",
            capabilities=["extract_fields"],
            source="langchain_hub",
        ),
    ]


@pytest.fixture
def catalog_records(slack_pair, unrelated_agents, make_tool, make_workflow):
    """Mixed catalogue: two duplicate pairs among seven records"""
    pdf = make_tool(
        id="tool-pdf",
        name="PDF Converter",
        tags=["pdf", "convert"],
        category="documents",
        tool_type="conversion",
        platform="web",
        features=["merge", "split"],
        quality_score=70,
        source="github",
    )
    pdf_pro = make_tool(
        id="tool-pdf-pro",
        name="PDF Converter Pro",
        tags=["pdf", "convert"],
        category="documents",
        tool_type="conversion",
        platform="web",
        features=["merge", "split", "compress"],
        quality_score=60,
        source="producthunt",
    )
    hubspot = make_workflow(
        id="wf-hubspot",
        name="Sync HubSpot Contacts to Sheets",
        tags=["hubspot", "crm"],
        category="sales",
        integrations=["hubspot", "google_sheets"],
        source="n8n",
    )
    return [
        slack_pair[0],
        pdf,
        unrelated_agents[0],
        slack_pair[1],
        pdf_pro,
        unrelated_agents[1],
        hubspot,
    ]


@pytest.fixture
def records_file(tmp_path, catalog_records):
    """catalog_records written as camelCase JSON, as upstream sources emit them"""
    path = tmp_path / "records.json"
    path.write_text(
        json.dumps(
            [r.model_dump(mode="json", by_alias=True) for r in catalog_records],
            indent=2,
        )
    )
    return path
