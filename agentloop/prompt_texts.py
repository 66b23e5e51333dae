# agentloop/prompt_texts.py
#
# Fixed instruction text shared by every generation call. The directive
# formats below are what agentloop.directives parses back out of replies.

CAPABILITIES_HEADER = "Capabilities (for use with the 'Task' directive):"

NO_CAPABILITIES = "- No capabilities are currently available."

DIRECTIVE_FORMATS = """Directive formats to use in your response:
1. To execute a capability:
```Task
{"id":"unique_id","kind":"capability_name","params":{/* JSON_parameters */},"dependsOn":["other_task_id"]}
```
   (Replace 'capability_name' with one of the kinds listed under 'Capabilities'. 'dependsOn' is optional.)
2. To render a UI component:
```Ui
{"id":"unique_ui_id","type":"ComponentType","props":{/* JSON_props */}}
```
3. To define a multi-step plan (executed one step at a time, you will see each result before the next step):
```Thinking
{"tasks":[{"id":"task1","kind":"capability_name","params":{...}}, ...]}
```"""

HISTORY_HEADER = "Interaction History:"

EMPTY_HISTORY = "(no prior interaction)"

ASSISTANT_CUE = "Assistant:"
