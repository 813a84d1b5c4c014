"""Click commands for campaigns, hooks, messages and participant groups."""