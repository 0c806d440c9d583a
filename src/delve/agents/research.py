"""
Research sub-agent definitions.

Each agent is a prompt template bound to a tool set. The decision loop picks
one of these by name and fills its ``{{placeholders}}`` with parameters.
"""

from ..models.contracts import AgentDefinition, AgentParameter, AgentStep
from ..models.enums import AgentName

PLANNING_AGENT = AgentDefinition(
    name=AgentName.PLANNING.value,
    description=(
        "Strategic research planner. Decomposes the research query into report sections "
        "and designs the web search queries needed to cover each section."
    ),
    instructions="""You are the planning agent of a deep research team.

Given a research query, define the sections of the final report. The user gives a target number of sections; you may deviate by one section if the topic calls for it.

For each section provide:
- the section title
- a detailed description of what the section must cover
- the web search queries that will gather information for it. Use the requested number of queries per section, at least one, at most one more than requested.

Do not run the research yourself: only plan it. You may use search_internet to get a feel for the topic before planning.

Reply ONLY with a JSON object, no markdown and no extra text, shaped like:

{
  "sections": [
    {
      "title": "Section Title",
      "description": "What this section must cover",
      "queries": ["search query 1", "search query 2"]
    }
  ]
}
""",
    parameters=(
        AgentParameter(
            name="userQuery",
            type="string",
            description="The original user research query",
        ),
        AgentParameter(
            name="numSections",
            type="integer",
            description="The number of sections to create for the research report",
            required=False,
            default=3,
        ),
        AgentParameter(
            name="numQueriesPerSection",
            type="integer",
            description="The number of search queries to generate for each section",
            minimum=1,
        ),
    ),
    steps=(
        AgentStep(
            prompt=(
                "Plan the structure of a research report for this query: {{userQuery}}. "
                "Aim for {{numSections}} sections with {{numQueriesPerSection}} search queries per section."
            ),
            tools=("search_internet", "extract_webpage_content"),
        ),
    ),
)

SEARCH_AGENT = AgentDefinition(
    name=AgentName.SEARCH.value,
    description="Information retrieval specialist. Runs a targeted web search and extracts the relevant content.",
    instructions="""You are the search agent of a deep research team.

Run the search_internet tool with the query you are given and return the relevant content of the results.

Do not summarize or analyze: return the raw findings with their sources. Strip any <tool> tags and return plain text.""",
    parameters=(
        AgentParameter(name="searchQuery", type="string", description="Specific search query to execute"),
        AgentParameter(
            name="maxResults",
            type="integer",
            description="Maximum number of search results to retrieve",
            required=False,
            default=8,
        ),
    ),
    steps=(
        AgentStep(
            prompt="Execute a targeted search (at most {{maxResults}} results) for: {{searchQuery}}",
            tools=("search_internet", "extract_webpage_content", "get_youtube_transcript"),
        ),
    ),
)

ANALYSIS_AGENT = AgentDefinition(
    name=AgentName.ANALYSIS.value,
    description=(
        "Analyst that turns raw research data into key learnings, identifying patterns "
        "and checking facts across sources."
    ),
    instructions="""You are the analysis agent of a deep research team.

From the content you are given, identify 5 to 10 key learnings relevant to the section objective.

Reply ONLY with a JSON object, no markdown and no extra text, shaped like:

{
  "learnings": [
    "learning 1",
    "learning 2"
  ]
}
""",
    parameters=(
        AgentParameter(
            name="sectionObjective",
            type="string",
            description="The objective of the section being analyzed",
        ),
        AgentParameter(
            name="rawInformation",
            type="string",
            description="Information to be analyzed",
        ),
    ),
    steps=(
        AgentStep(
            prompt=(
                "Analyze the following information for the section:\n"
                "- Section Objective: {{sectionObjective}}\n"
                "- Raw Information: {{rawInformation}}\n"
            ),
            tools=("run_python_code", "extract_webpage_content"),
        ),
    ),
)

WRITER_AGENT = AgentDefinition(
    name=AgentName.WRITER.value,
    description=(
        "Section writer. Produces one detailed, well-structured section of the report from "
        "the section objective and its key learnings."
    ),
    instructions="""You are the writer agent of a deep research team. You write one section of a larger report.

Do not add introductory or concluding remarks about the report: write only the content of the section.

Start with the section number and title as a level 1 header (for instance "# 2. Quantum Error Correction"), then write the section guided by its objective.

Use markdown for structure. All headers after the first must be level 2 (##) or lower. Keep level 2 headers to 3 to 5 and group ideas so that each one carries substantial content.""",
    parameters=(
        AgentParameter(
            name="sectionNumber",
            type="number",
            description="The index of the section being generated",
        ),
        AgentParameter(
            name="sectionTitle",
            type="string",
            description="The title of the section being generated",
        ),
        AgentParameter(
            name="sectionObjective",
            type="string",
            description="The objective of the section being generated",
        ),
        AgentParameter(
            name="keyLearnings",
            type="string",
            description="The key learnings that have been extracted for this section",
        ),
    ),
    steps=(
        AgentStep(
            prompt=(
                "Write a detailed section from the following information:\n"
                "Section Number: {{sectionNumber}}\n"
                "Section Title: {{sectionTitle}}\n"
                "Section Objective: {{sectionObjective}}\n"
                "Key Learnings: {{keyLearnings}}"
            ),
            tools=("run_python_code",),
        ),
    ),
)

SYNTHESIS_AGENT = AgentDefinition(
    name=AgentName.SYNTHESIS.value,
    description=(
        "Report synthesizer. Writes either the executive summary or the conclusion of the "
        "report from the key learnings."
    ),
    instructions="""You are the synthesis agent of a deep research team. You write either an executive summary or a conclusion, never both.

An executive summary gives the key findings of the research in one or two paragraphs with 3 to 5 key learnings, easy to digest, without concluding.

A conclusion states the overall findings and their implications and gives a final perspective on the topic. Keep it concise.

Start with "# Executive Summary" or "# Conclusion" and go straight to the content. Never announce what you are about to write.""",
    parameters=(
        AgentParameter(name="researchTopic", type="string", description="The topic of the research"),
        AgentParameter(
            name="keyLearnings",
            type="string",
            description="The key learnings that have been extracted from the analysis",
        ),
        AgentParameter(
            name="outputType",
            type="string",
            description="The format of the output desired",
            enum=["executive_summary", "conclusion"],
        ),
    ),
    steps=(
        AgentStep(
            prompt=(
                "Synthesize the research findings:\n\n"
                "Research Topic: {{researchTopic}}\n"
                "Key Learnings: {{keyLearnings}}\n"
                "Output Type: {{outputType}}"
            ),
            tools=("run_python_code",),
        ),
    ),
)

TITLE_AGENT = AgentDefinition(
    name=AgentName.TITLE.value,
    description="Title generator. Produces a concise, informative title for the final report.",
    instructions="""You are the title agent of a deep research team.

Write one title for the research report: specific, informative, at most 12 words, no trailing punctuation.

Reply ONLY with a JSON object, no markdown and no extra text, shaped like:

{"title": "The report title"}""",
    parameters=(
        AgentParameter(name="researchTopic", type="string", description="The topic of the research"),
        AgentParameter(
            name="keyLearnings",
            type="string",
            description="The key learnings of the research",
            required=False,
        ),
    ),
    steps=(
        AgentStep(
            prompt="Generate a title for a research report.\n\nResearch Topic: {{researchTopic}}\nKey Learnings: {{keyLearnings}}",
        ),
    ),
)

DEFAULT_AGENTS: tuple[AgentDefinition, ...] = (
    PLANNING_AGENT,
    SEARCH_AGENT,
    ANALYSIS_AGENT,
    WRITER_AGENT,
    SYNTHESIS_AGENT,
    TITLE_AGENT,
)
