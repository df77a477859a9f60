from training_scheduler.repositories import RepositoryFactory


def test_exists_and_get(db, make_onboarding):
    repository = RepositoryFactory.create_onboarding_repository(db)
    case = make_onboarding(account_name="Nasi Lemak Express")

    assert repository.exists_case(case.id)
    assert not repository.exists_case("01ARZ3NDEKTSV4RRFFQ69G5FAV")
    assert repository.get(case.id).account_name == "Nasi Lemak Express"
    assert repository.get("missing") is None
