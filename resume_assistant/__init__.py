"""Resume Assistant — chat backend for a personal portfolio site.

Architecture Overview
=====================

Each query goes through a small **LangGraph** state machine:

1. **classify** — ordered keyword rules pick one intent (resume download,
   name question, availability, scheduling, salary, small talk, off-topic,
   or the default career question).

2. **canned_reply** — scripted answers for every intent that does not
   need the model, including the ``showMeetingPopup`` signal the client
   uses to open its meeting / email form.

3. **model_reply** — small talk gets a persona-only prompt; career
   questions get the guardian prompt with the full resume injected.  The
   conversation window is trimmed to one system message, at most one
   earlier user and one earlier assistant message, and the current query.

Key Design Decisions
--------------------
- **LLM**: Perplexity ``sonar`` via its OpenAI-compatible chat-completions
  API, called with ``httpx``.
- **Never break the chat**: a missing API key yields a ``demo`` reply and
  a failed model call yields a ``demo-fallback`` reply, both with HTTP 200.
- **Resume data**: ``data/resume.json`` is validated with pydantic, loaded
  once at start-up and cached for the process lifetime.
- **Dual Interface**: FastAPI server (production) + CLI chat loop.

Package Structure
-----------------
- ``resume_assistant/agent.py`` — LangGraph intent router
- ``resume_assistant/intents.py`` — keyword rule table and classifier
- ``resume_assistant/conversation.py`` — model message window
- ``resume_assistant/prompts.py`` — system prompts and scripted replies
- ``resume_assistant/summary.py`` — conversation summaries for hand-off
- ``resume_assistant/config.py`` — configuration from environment variables
- ``resume_assistant/server.py`` — FastAPI application
- ``resume_assistant/main.py`` — CLI chat interface
- ``resume_assistant/services/`` — model gateway, resume store, metrics
"""
