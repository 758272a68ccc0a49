"""Recording fakes of the collaborator interfaces, for tests."""